"""
Execution Layer - Screen Orchestration and Component Generation

Defines the ScreenEngine (route, execute, assemble), the ScreenExecutor
(one method per action) and the ComponentGenerator (LLM call with retry).
"""

from screen_builder.execution.assembler import assemble_screen
from screen_builder.execution.engine import ScreenEngine
from screen_builder.execution.executor import ExecutionResult, ScreenExecutor
from screen_builder.execution.generator import ComponentGenerator, clean_html


__all__ = [
    "ComponentGenerator",
    "ExecutionResult",
    "ScreenEngine",
    "ScreenExecutor",
    "assemble_screen",
    "clean_html",
]
