class Layer:
    # Subclasses override as needed
    def forward(self, x):
        # x: column Matrix, returns a new column Matrix
        raise NotImplementedError

    def params(self):
        # Return list of parameter matrices (e.g., [W, b])
        return []

    def __call__(self, x):
        return self.forward(x)
