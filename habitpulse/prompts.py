"""Deterministic daily gratitude prompt."""

from __future__ import annotations

from habitpulse.models import Prompt

GRATITUDE_PROMPTS: tuple[Prompt, ...] = (
    Prompt("prompt-1", "Name one habit that made you proud today."),
    Prompt("prompt-2", "Recall a moment someone made you smile today."),
    Prompt("prompt-3", "What are you grateful for that helped you stay consistent?"),
    Prompt("prompt-4", "Write one tiny win you celebrated today."),
    Prompt("prompt-5", "Who encouraged you recently? Capture their words."),
    Prompt("prompt-6", "Describe a habit that felt effortless today."),
    Prompt("prompt-7", "Share one improvement you noticed in yourself this week."),
    Prompt("prompt-8", "What energized you most while working on your habits?"),
    Prompt("prompt-9", "Write one positive surprise from your day."),
    Prompt("prompt-10", "Which habit moved you closer to your goals today?"),
)


def prompt_index(key: str, count: int) -> int:
    """Fold ``(acc + ord(ch) * 31) % count`` over the key, starting at 0."""
    if count < 1:
        raise ValueError("prompt list must not be empty")
    acc = 0
    for ch in key:
        acc = (acc + ord(ch) * 31) % count
    return acc


def prompt_for_date(key: str, prompts: tuple[Prompt, ...] | list[Prompt] = GRATITUDE_PROMPTS) -> Prompt:
    """Same key, same prompt; on every machine and every run."""
    return prompts[prompt_index(key, len(prompts))]


def find_prompt(prompt_id: str, prompts: tuple[Prompt, ...] | list[Prompt] = GRATITUDE_PROMPTS) -> Prompt | None:
    for prompt in prompts:
        if prompt.id == prompt_id:
            return prompt
    return None
