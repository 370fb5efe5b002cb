import numpy as np


class variable(object):
	"""
	Named field stored on a numpy array that includes the ghost layer.

	The staggered layout gives every field its own shape:
	u -> (Nx+1, Ny+2), v -> (Nx+2, Ny+1), p -> (Nx+2, Ny+2).
	"""
	def __init__(
			self,
			name : str,
			nx : int,
			ny : int,
			value : float = 0.0):

		self.name = name

		self.nx = nx
		self.ny = ny

		self.field = np.zeros((nx, ny))
		self.initialize(value)

	@property
	def shape(self):
		return self.field.shape

	def initialize(self, value : float = 0.0) -> None:
		# Fill in place so that views handed out earlier stay valid
		self.field.fill(value)

	def assign(self, other) -> None:
		"""Copy the values of another field of the same shape."""
		values = other.field if isinstance(other, variable) else np.asarray(other)
		if values.shape != self.field.shape:
			raise ValueError(
				f"cannot assign shape {values.shape} to field '{self.name}' of shape {self.field.shape}"
			)
		self.field[...] = values

	def copy(self, name : str = None) -> "variable":
		duplicate = variable(name or self.name, self.nx, self.ny)
		duplicate.field[...] = self.field
		return duplicate

	def __getitem__(self, index):
		return self.field[index]

	def __setitem__(self, index, value):
		self.field[index] = value
		return None

	def __str__(self):

		fmt = "{:10.4f}"
		nx, ny = self.field.shape  # nx = i-direction, ny = j-direction

		lines = [f"Field '{self.name}' (shape={self.field.shape}):"]

		for i in range(nx):
			line = "".join(fmt.format(self.field[i, j]) for j in range(ny))
			lines.append(line)

		return "\n".join(lines)
