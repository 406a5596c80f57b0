"""文本规范化.

用于匹配的文本视图：折叠所有空白、统一弯引号为直引号，保留大小写。
比较时统一使用 :func:`fold_case`，它逐字符折叠大小写且不改变长度，
因此规范化文本上的下标可以直接用于折叠后的文本。
"""

import re

from pdf_explainer.data.models import NormalizedText

# 连续的非空白字符；\s 与 str.isspace 覆盖同一组 Unicode 空白
_TOKEN_RE = re.compile(r"\S+")

# 弯引号码位 -> 直引号
_QUOTE_TABLE = {
    0x201C: '"',  # 左双引号
    0x201D: '"',  # 右双引号
    0x201E: '"',  # 低位双引号
    0x201F: '"',  # 反向双引号
    0x2018: "'",  # 左单引号
    0x2019: "'",  # 右单引号
    0x201A: "'",  # 低位单引号
    0x201B: "'",  # 反向单引号
}


def normalize_text(raw: str) -> str:
    """规范化文本.

    Args:
        raw: 原始文本

    Returns:
        空白折叠为单个空格、首尾去空白、引号统一后的文本
    """
    if not raw:
        return ""
    return " ".join(_TOKEN_RE.findall(raw)).translate(_QUOTE_TABLE)


def build_normalized_view(raw: str) -> NormalizedText:
    """规范化文本并记录每个字符在原文中的位置.

    Args:
        raw: 原始文本

    Returns:
        NormalizedText，其 text 与 normalize_text(raw) 相同
    """
    chars = []
    offsets = []
    prev_end = None
    for match in _TOKEN_RE.finditer(raw or ""):
        if prev_end is not None:
            # 折叠后的空格指向原空白段的第一个字符
            chars.append(" ")
            offsets.append(prev_end)
        chars.append(match.group().translate(_QUOTE_TABLE))
        offsets.extend(range(match.start(), match.end()))
        prev_end = match.end()
    return NormalizedText(text="".join(chars), offsets=tuple(offsets))


def _fold_char(char: str) -> str:
    folded = char.casefold()
    if len(folded) == 1:
        return folded
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


def fold_case(text: str) -> str:
    """逐字符折叠大小写，结果与输入等长."""
    if text.isascii():
        return text.lower()
    return "".join(_fold_char(c) for c in text)
