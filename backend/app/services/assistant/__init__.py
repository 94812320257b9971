"""Prompt-completion assistant package"""
from app.services.assistant.flows import POPULAR_ROUTES, AssistantService
from app.services.assistant.prompt_client import PromptClient

__all__ = [
    'AssistantService',
    'POPULAR_ROUTES',
    'PromptClient',
]
