"""
Step configuration model.

The step is driven by a handful of scalar inputs provided by the
calling pipeline. Values arrive as strings from the environment and
are coerced here.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

GenerationMode = Literal["command", "template"]


class StepConfig(BaseModel):
    """Inputs of the wrapper step.

    ``android_home`` is only needed by the template mode, which stages
    the wrapper from the Android SDK instead of running ``gradle``.
    """

    project_root_dir: str = ""
    gradle_version: str = ""
    android_home: str = ""

    generation_mode: GenerationMode = "command"
    gradle_bin: str = "gradle"
    download_distribution: bool = False
    export_outputs: bool = True
    download_timeout: int = 300     # seconds

    def summary_lines(self) -> list[str]:
        """Human-readable dump of the inputs, printed before validation."""
        return [
            f"- ProjectRootDir: {self.project_root_dir}",
            f"- GradleVersion: {self.gradle_version}",
            f"- AndroidHome: {self.android_home}",
            f"- GenerationMode: {self.generation_mode}",
        ]
