"""Prompts for the triage enhancement call."""

from src.config.prompts.triage import build_triage_analysis_prompt, build_triage_system_prompt

__all__ = [
    "build_triage_analysis_prompt",
    "build_triage_system_prompt",
]
