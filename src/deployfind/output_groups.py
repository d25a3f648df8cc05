"""Extra build output groups the deploy-archive finder depends on.

The finder can only resolve classes from archives the build actually
produced, so when it is enabled the resolve step also requests the render
output group for Android targets.
"""

from __future__ import annotations

import enum
from typing import AbstractSet

from deployfind.config import Settings, is_enabled

RENDER_RESOLVE_OUTPUT_GROUP = "intellij-resolve-render-android"
ANDROID_LANGUAGE = "android"


class OutputGroup(enum.Enum):
    INFO = "info"
    RESOLVE = "resolve"
    COMPILE = "compile"


def additional_output_groups(
    output_group: OutputGroup,
    active_languages: AbstractSet[str],
    settings: Settings | None = None,
) -> frozenset[str]:
    if (
        output_group is not OutputGroup.RESOLVE
        or ANDROID_LANGUAGE not in active_languages
        or not is_enabled(settings)
    ):
        return frozenset()
    return frozenset({RENDER_RESOLVE_OUTPUT_GROUP})
