"""数据模型定义."""

from dataclasses import dataclass
from typing import Optional, Tuple


# 定位策略
STRATEGY_EXACT = "exact"  # 完整高亮命中
STRATEGY_PROBE_RETRY = "probe_retry"  # 截取高亮前缀重试后命中
STRATEGY_FALLBACK = "fallback"  # 未命中，取文档开头

# 规范化位置回溯到原文位置的方式
ANCHOR_OFFSET_MAP = "offset_map"
ANCHOR_PREFIX_SEARCH = "prefix_search"
ANCHOR_RATIO_ESTIMATE = "ratio_estimate"


@dataclass(frozen=True)
class NormalizedText:
    """规范化文本及其到原文的偏移映射.

    ``offsets[i]`` 是 ``text[i]`` 在原文中的下标；折叠后的空白对应原空白段的第一个字符。
    """

    text: str
    offsets: Tuple[int, ...]

    def original_span(self, start: int, end: int) -> Optional[Tuple[int, int]]:
        """将规范化文本中的 [start, end) 区间映射回原文区间.

        Args:
            start: 规范化文本中的起始位置
            end: 规范化文本中的结束位置（不含）

        Returns:
            原文中的 (起始, 结束) 区间；映射表不覆盖该区间时返回 None
        """
        if start < 0 or end <= start or end > len(self.offsets):
            return None
        return self.offsets[start], self.offsets[end - 1] + 1


@dataclass(frozen=True)
class ContextWindow:
    """高亮上下文窗口.

    ``text`` 始终是原文的连续子串，满足 ``document_text[start:end] == text``。
    """

    text: str
    found: bool
    start: int = 0
    end: int = 0
    strategy: str = STRATEGY_FALLBACK
    anchor: Optional[str] = None
