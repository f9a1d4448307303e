# LLM settings live beside the factory that consumes them
from ecos.llm.config import EvaluationModels, LLMSettings, ModelSettings

__all__ = ["EvaluationModels", "LLMSettings", "ModelSettings"]
