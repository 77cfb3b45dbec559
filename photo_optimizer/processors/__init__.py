from .optimizer import OptimizerToolchain

__all__ = ['OptimizerToolchain']
