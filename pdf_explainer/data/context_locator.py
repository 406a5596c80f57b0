"""高亮上下文定位器."""

from typing import Optional, Tuple

from loguru import logger

from pdf_explainer.config.settings import LocatorConfig, settings
from pdf_explainer.data.models import (
    ANCHOR_OFFSET_MAP,
    ANCHOR_PREFIX_SEARCH,
    ANCHOR_RATIO_ESTIMATE,
    STRATEGY_EXACT,
    STRATEGY_FALLBACK,
    STRATEGY_PROBE_RETRY,
    ContextWindow,
    NormalizedText,
)
from pdf_explainer.data.text_normalizer import build_normalized_view, fold_case, normalize_text


class HighlightContextLocator:
    """高亮上下文定位器.

    在文档全文中定位用户粘贴的高亮文本，并截取其前后一段有界的原文作为讲解依据。
    定位失败（高亮过短、未命中）时返回文档开头作为兜底窗口，不抛出异常。
    """

    def __init__(self, config: Optional[LocatorConfig] = None):
        """初始化上下文定位器.

        Args:
            config: 定位策略配置，默认使用全局配置
        """
        self.config = config or settings.locator

    def locate(self, document_text: str, highlight: str) -> ContextWindow:
        """定位高亮文本的上下文.

        Args:
            document_text: 文档全文（pdftotext 的输出）
            highlight: 用户粘贴的高亮文本

        Returns:
            上下文窗口；found 表示是否真正定位到高亮
        """
        document_text = document_text or ""
        query = normalize_text(highlight or "")

        if len(query) < self.config.min_highlight_length:
            logger.debug(f"高亮过短（{len(query)} 字符），直接使用文档开头")
            return self._fallback(document_text)

        view = build_normalized_view(document_text)
        haystack = fold_case(view.text)

        strategy = STRATEGY_EXACT
        probe = query
        index = haystack.find(fold_case(probe))

        # 用户粘贴的内容可能多于原高亮（多带了后续句子、OCR噪声），截取前缀重试
        if index == -1 and len(query) > self.config.probe_length:
            probe = query[:self.config.probe_length].rstrip()
            index = haystack.find(fold_case(probe))
            strategy = STRATEGY_PROBE_RETRY

        if index == -1:
            logger.debug("文档中未找到高亮文本，使用文档开头")
            return self._fallback(document_text)

        match_start, match_end, anchor = self._to_original_span(
            document_text, view, highlight, index, len(probe)
        )
        start, end = self._window_bounds(len(document_text), match_start, match_end)
        logger.debug(
            f"高亮定位成功: 策略={strategy}, 回溯方式={anchor}, "
            f"匹配区间=[{match_start}, {match_end}), 窗口=[{start}, {end})"
        )
        return ContextWindow(
            text=document_text[start:end],
            found=True,
            start=start,
            end=end,
            strategy=strategy,
            anchor=anchor,
        )

    def _fallback(self, document_text: str) -> ContextWindow:
        """兜底窗口：文档开头的固定长度."""
        end = min(len(document_text), self.config.fallback_context_length, self.config.max_context_length)
        return ContextWindow(
            text=document_text[:end],
            found=False,
            start=0,
            end=end,
            strategy=STRATEGY_FALLBACK,
        )

    def _to_original_span(
        self,
        document_text: str,
        view: NormalizedText,
        highlight: str,
        index: int,
        length: int,
    ) -> Tuple[int, int, str]:
        """将规范化文本中的命中位置回溯到原文.

        依次尝试：偏移映射表（精确）、原文直接搜索高亮前缀、按长度比例估算。
        比例估算的误差不超过命中位置之前被折叠掉的空白字符数。

        Returns:
            原文中的 (起始, 结束, 回溯方式)
        """
        doc_length = len(document_text)

        if self.config.use_offset_map:
            span = view.original_span(index, index + length)
            if span is not None:
                return span[0], span[1], ANCHOR_OFFSET_MAP

        prefix = (highlight or "").strip()[:self.config.anchor_prefix_length]
        if prefix:
            # 规范化只删除字符，原文中的命中位置不会早于规范化位置
            position = fold_case(document_text).find(fold_case(prefix), index)
            if position != -1:
                return position, min(doc_length, position + length), ANCHOR_PREFIX_SEARCH

        ratio = doc_length / len(view.text) if view.text else 1.0
        start = min(doc_length, int(index * ratio))
        end = min(doc_length, max(start, int((index + length) * ratio)))
        return start, end, ANCHOR_RATIO_ESTIMATE

    def _window_bounds(self, doc_length: int, match_start: int, match_end: int) -> Tuple[int, int]:
        """以命中区间为中心向两侧扩展，并限制在文档范围与最大长度内."""
        radius = self.config.context_radius
        max_length = self.config.max_context_length

        start = max(0, match_start - radius)
        end = min(doc_length, match_end + radius)

        if end - start > max_length:
            # 以命中区间中点为中心对称收缩
            center = (match_start + match_end) // 2
            start = max(0, center - max_length // 2)
            end = min(doc_length, start + max_length)
            start = max(0, end - max_length)

        return start, end
