"""
cudaflags — resolve CUDA compute capabilities into nvcc architecture flags.
"""

__version__ = "0.1.0"
