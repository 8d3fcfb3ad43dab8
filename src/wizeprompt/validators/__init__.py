from .model_parameters import are_valid_model_parameters, parse_model_parameters
from .input_validators import is_positive_id

__all__ = ["are_valid_model_parameters", "parse_model_parameters", "is_positive_id"]
