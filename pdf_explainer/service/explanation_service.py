"""讲解生成服务."""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field

from pdf_explainer.config.settings import settings
from pdf_explainer.utils.errors import ExplainerError

NO_OUTPUT = "No output returned."


class Mode(str, Enum):
    """讲解模式."""

    QUICK = "quick"
    BREAKDOWN = "breakdown"
    EXAMPLE = "example"
    ASSUMPTIONS = "assumptions"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Mode":
        """解析讲解模式，未知值回退为 breakdown."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.BREAKDOWN


class ReadingLevel(str, Enum):
    """阅读水平."""

    MIDDLE = "middle"
    HIGH = "high"
    COLLEGE = "college"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ReadingLevel":
        """解析阅读水平，未知值回退为 high."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.HIGH


class ExplanationRequest(BaseModel):
    """讲解请求模型."""

    highlight: str = Field(..., description="用户高亮的原文")
    context: str = Field(..., description="定位得到的上下文窗口文本")
    mode: Mode = Field(default=Mode.BREAKDOWN, description="讲解模式")
    reading_level: ReadingLevel = Field(default=ReadingLevel.HIGH, description="阅读水平")


def load_instructions(path: Union[str, Path]) -> Dict[str, Dict[str, str]]:
    """加载讲解模式与阅读水平指令.

    Args:
        path: prompts.yaml 路径

    Returns:
        {"modes": {...}, "reading_levels": {...}}

    Raises:
        ValueError: 文件缺少必要的指令
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    modes = data.get("modes") or {}
    levels = data.get("reading_levels") or {}
    missing = [m.value for m in Mode if m.value not in modes] + [level.value for level in ReadingLevel if level.value not in levels]
    if missing:
        raise ValueError(f"指令文件 {path} 缺少: {', '.join(missing)}")

    logger.debug(f"已加载讲解指令: {path}")
    return {"modes": modes, "reading_levels": levels}


class ExplanationService:
    """讲解生成服务."""

    def __init__(self, llm_client=None, instructions: Optional[Dict[str, Dict[str, str]]] = None):
        """初始化讲解生成服务.

        Args:
            llm_client: 大模型客户端，如果为None则自动创建
            instructions: 模式与阅读水平指令，如果为None则从配置文件加载
        """
        if llm_client is None:
            from pdf_explainer.service.llm_client import LLMClient
            self.llm_client = LLMClient()
        else:
            self.llm_client = llm_client

        self.instructions = instructions or load_instructions(settings.llm.prompts_file)

        # 提示词模板
        self.prompt_template = settings.llm.prompt_template
        self.system_message = settings.llm.system_message

    def build_prompt(self, request: ExplanationRequest) -> str:
        """根据模式与阅读水平构建提示词.

        Args:
            request: 讲解请求模型

        Returns:
            格式化后的提示词
        """
        try:
            prompt = self.prompt_template.format(
                level_instructions=self.instructions["reading_levels"][request.reading_level.value].strip(),
                mode_instructions=self.instructions["modes"][request.mode.value].strip(),
                highlight=request.highlight,
                context=request.context,
            )
        except KeyError as ke:
            logger.error(f"提示词模板格式化错误: 缺少参数 {ke}，请检查PROMPT_TEMPLATE配置")
            raise ExplainerError(f"Invalid prompt template: unknown placeholder {ke}") from ke
        return prompt.strip()

    def explain(self, request: ExplanationRequest) -> str:
        """生成高亮文本的讲解.

        Args:
            request: 讲解请求模型

        Returns:
            讲解文本；大模型无输出时返回 "No output returned."

        Raises:
            ProviderError: 大模型请求失败
        """
        prompt = self.build_prompt(request)
        logger.info(f"请求讲解: 模式={request.mode.value}, 阅读水平={request.reading_level.value}, 上下文 {len(request.context)} 字符")

        # 调用大模型获取回复
        response = self.llm_client.chat_completion(
            system_message=self.system_message,
            user_message=prompt,
        )

        if not response:
            logger.warning("大模型未返回有效响应")
            return NO_OUTPUT

        return response
