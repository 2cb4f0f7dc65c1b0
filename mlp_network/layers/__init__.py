from .Layer import Layer
from .Activation import Activation, ActivationType
from .Dense import Dense

__all__ = [
    "Layer",
    "Activation",
    "ActivationType",
    "Dense",
]
