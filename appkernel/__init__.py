"""appkernel - application bootstrap and front controller"""

__version__ = "1.0.0"
