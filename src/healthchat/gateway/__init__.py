from .base import CompletionGateway
from .factory import create_gateway
from .models import GatewayContext, GatewayRequest, GatewayResponse, Language, encode_image
from .providers import FunctionGateway, ModelGateway

__all__ = [
    "CompletionGateway",
    "create_gateway",
    "GatewayContext",
    "GatewayRequest",
    "GatewayResponse",
    "Language",
    "encode_image",
    "FunctionGateway",
    "ModelGateway",
]
