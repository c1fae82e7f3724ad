from .errors import ImageToolError, DecodeError, EncodeError, InvalidArgument, OutOfBounds, UsageError
from .helpers import (
    GeneratorConfig, FractalParams, PipelineConfig, CropRect, TransformRequest,
    parse_crop, decode_image, encode_image, load_image_rgb, save_image,
)
from .generators import GenerationMode, generate_gradient, generate_fractal
from .pipeline import TransformPipeline, apply
from .viz import Visualizer

__all__ = [
    "ImageToolError", "DecodeError", "EncodeError", "InvalidArgument", "OutOfBounds", "UsageError",
    "GeneratorConfig", "FractalParams", "PipelineConfig", "CropRect", "TransformRequest",
    "parse_crop", "decode_image", "encode_image", "load_image_rgb", "save_image",
    "GenerationMode", "generate_gradient", "generate_fractal",
    "TransformPipeline", "apply",
    "Visualizer",
]
