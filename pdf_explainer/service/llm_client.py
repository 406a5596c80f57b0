"""大模型客户端服务."""

import os
from typing import Optional

from loguru import logger
from openai import OpenAI, OpenAIError

from pdf_explainer.config.settings import LLMConfig, settings
from pdf_explainer.utils.errors import MissingCredentialsError, ProviderError


class LLMClient:
    """大模型客户端.

    负责与大模型API的基础通信，不包含特定业务逻辑。
    """

    def __init__(self, config: Optional[LLMConfig] = None) -> None:
        """初始化大模型客户端.

        Args:
            config: 大模型配置，默认使用全局配置

        Raises:
            MissingCredentialsError: 未配置API密钥
        """
        config = config or settings.llm

        # 从环境变量或设置获取API密钥
        self.api_key = os.environ.get("OPENAI_API_KEY") or config.api_key
        if not self.api_key:
            logger.error("未设置API密钥，请在环境变量或 .env 中设置 OPENAI_API_KEY")
            raise MissingCredentialsError(
                "Missing OPENAI_API_KEY. Put it in .env in the project root (no quotes), then restart the server."
            )

        # 从环境变量或设置获取API基础URL
        self.api_base_url = os.environ.get("OPENAI_API_BASE") or config.api_base_url

        # 创建OpenAI客户端
        client_kwargs = {"api_key": self.api_key}
        if self.api_base_url:
            client_kwargs["base_url"] = self.api_base_url

        self.client = OpenAI(**client_kwargs)

        # 模型设置
        self.model_name = config.model_name
        self.max_tokens = config.max_tokens
        self.temperature = config.temperature
        self.timeout = config.timeout

        logger.info(f"大模型客户端已初始化，使用模型: {self.model_name}, API基础URL: {self.api_base_url or '默认'}")

    def chat_completion(
        self,
        user_message: str,
        system_message: str = "You are a helpful assistant.",
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[int] = None
    ) -> str:
        """发送聊天请求到大模型.

        Args:
            user_message: 用户消息
            system_message: 系统消息
            temperature: 温度参数，控制生成的随机性
            max_tokens: 最大生成token数
            timeout: 超时时间(秒)

        Returns:
            大模型返回的文本，无有效选项时返回空字符串

        Raises:
            ProviderError: 请求失败
        """
        try:
            logger.debug(f"发送聊天请求到LLM: {user_message[:200]}...")

            # 发送请求到LLM服务
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_message},
                    {"role": "user", "content": user_message},
                ],
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                timeout=timeout or self.timeout,
            )
        except OpenAIError as e:
            logger.error(f"大模型请求失败: {e}")
            # 向上层抛出异常，让调用者决定如何处理
            raise ProviderError(f"Explanation request failed: {e}") from e

        # 提取生成的文本
        if not response.choices:
            logger.warning("大模型未返回有效选项")
            return ""

        result = (response.choices[0].message.content or "").strip()
        logger.info(f"大模型返回: {result[:200]}...")

        return result
