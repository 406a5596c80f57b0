"""项目异常定义.

所有异常都带有 ``status_code``，HTTP 层据此返回 400（请求问题）或 500（服务问题）。
上下文定位器本身从不抛出异常，这里的异常只来自外部协作方：PDF 提取与大模型调用。
"""

from typing import Optional


class ExplainerError(Exception):
    """项目异常基类."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """初始化异常.

        Args:
            message: 面向用户的错误信息
            status_code: 覆盖默认的 HTTP 状态码
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(ExplainerError):
    """请求参数缺失或不合法."""

    status_code = 400


class ExtractionError(ExplainerError):
    """PDF 文本提取失败（非零退出码、超时等）."""


class ExtractorNotFoundError(ExtractionError):
    """找不到 pdftotext 可执行文件."""


class PdfTooLargeError(ExtractionError):
    """上传的 PDF 超过大小上限."""

    status_code = 400


class NoTextLayerError(ExtractionError):
    """PDF 没有可读的文本层（通常是扫描件）."""

    status_code = 400


class MissingCredentialsError(ExplainerError):
    """未配置大模型 API 密钥."""


class ProviderError(ExplainerError):
    """大模型服务调用失败."""
