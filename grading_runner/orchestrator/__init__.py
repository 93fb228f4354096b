from grading_runner.orchestrator.emitter import ResultEmitter
from grading_runner.orchestrator.pipeline import GradingPipeline

__all__ = [
    "ResultEmitter",
    "GradingPipeline",
]
