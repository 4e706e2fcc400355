"""Azure OpenAI text generation."""

from .azure_text_client import AzureTextClient
from .prompt_builder import PromptBundle, RecordPromptBuilder, SplitFieldPromptBuilder

__all__ = ["AzureTextClient", "PromptBundle", "RecordPromptBuilder", "SplitFieldPromptBuilder"]
