from .base import BenchmarkProblem
from .catalog import (
    FunctionId,
    FunctionSpec,
    available_function_names,
    evaluate,
    evaluate_batch,
    function_specs,
    get_function_spec,
    resolve_function_id,
)

__all__ = [
    "BenchmarkProblem",
    "FunctionId",
    "FunctionSpec",
    "available_function_names",
    "evaluate",
    "evaluate_batch",
    "function_specs",
    "get_function_spec",
    "resolve_function_id",
]
