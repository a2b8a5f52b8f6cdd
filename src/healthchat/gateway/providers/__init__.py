from .function import FunctionGateway
from .model import ModelGateway

__all__ = ["FunctionGateway", "ModelGateway"]
