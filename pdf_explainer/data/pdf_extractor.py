"""PDF文本提取."""

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from pdf_explainer.config.settings import ExtractionConfig, settings
from pdf_explainer.utils.errors import (
    ExtractionError,
    ExtractorNotFoundError,
    NoTextLayerError,
    PdfTooLargeError,
)

# 部署时随项目打包的 Poppler 可执行文件位置
BUNDLED_PDFTOTEXT = Path("vendor") / "poppler" / "bin" / "pdftotext"


class PdfTextExtractor:
    """PDF文本提取类.

    调用 Poppler 的 pdftotext 将PDF字节转换为纯文本，不做任何PDF解析。
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """初始化PDF文本提取器.

        Args:
            config: 提取配置，默认使用全局配置
        """
        self.config = config or settings.extraction

    @staticmethod
    def load_pdf(file_path: Union[str, Path]) -> bytes:
        """读取PDF文件.

        Args:
            file_path: PDF文件路径

        Returns:
            文件字节内容

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 文件格式不正确
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        if file_path.suffix.lower() not in ['.pdf']:
            raise ValueError(f"不支持的文件类型: {file_path.suffix}")

        data = file_path.read_bytes()
        logger.info(f"已加载PDF: {file_path} ({len(data)} 字节)")
        return data

    def resolve_binary(self) -> str:
        """确定 pdftotext 可执行文件路径.

        优先级：配置的 PDFTOTEXT_PATH > 项目内打包的 vendor/poppler > 系统 PATH。

        Raises:
            ExtractorNotFoundError: 找不到可执行文件
        """
        if self.config.pdftotext_path:
            return self.config.pdftotext_path

        bundled = settings.project_dir / BUNDLED_PDFTOTEXT
        if bundled.exists():
            return str(bundled)

        found = shutil.which("pdftotext")
        if found:
            return found

        raise ExtractorNotFoundError(
            "PDF extraction failed: pdftotext not found. Install Poppler (e.g. brew install poppler)."
        )

    def extract_text(self, pdf_bytes: bytes) -> str:
        """提取PDF中的全部文本.

        Args:
            pdf_bytes: PDF文件字节内容

        Returns:
            提取出的纯文本

        Raises:
            PdfTooLargeError: 文件超过大小上限
            ExtractorNotFoundError: 找不到 pdftotext
            ExtractionError: pdftotext 执行失败或超时
            NoTextLayerError: 没有可读文本（扫描件）
        """
        if len(pdf_bytes) > self.config.max_upload_bytes:
            limit_mb = self.config.max_upload_bytes // (1024 * 1024)
            raise PdfTooLargeError(f"PDF too large (max {limit_mb}MB)")

        binary = self.resolve_binary()

        with tempfile.TemporaryDirectory(prefix="pdf-explain-") as tmp_dir:
            pdf_path = Path(tmp_dir) / "input.pdf"
            txt_path = Path(tmp_dir) / "output.txt"
            pdf_path.write_bytes(pdf_bytes)

            # -enc UTF-8 保证输出编码一致，-nopgbrk 去掉分页符
            try:
                subprocess.run(
                    [binary, "-enc", "UTF-8", "-nopgbrk", str(pdf_path), str(txt_path)],
                    check=True,
                    capture_output=True,
                    timeout=self.config.timeout,
                )
            except FileNotFoundError as e:
                logger.error(f"pdftotext 不可用: {e}")
                raise ExtractorNotFoundError(
                    f"PDF extraction failed. Install Poppler: brew install poppler. Details: {e}"
                ) from e
            except subprocess.TimeoutExpired as e:
                logger.error(f"pdftotext 超时（{self.config.timeout}秒）")
                raise ExtractionError(f"PDF extraction failed. Details: timed out after {self.config.timeout}s") from e
            except subprocess.CalledProcessError as e:
                stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
                logger.error(f"pdftotext 执行失败，退出码 {e.returncode}: {stderr}")
                raise ExtractionError(
                    f"PDF extraction failed. Details: exit code {e.returncode} {stderr}".strip()
                ) from e

            text = txt_path.read_text(encoding="utf-8", errors="replace") if txt_path.exists() else ""

        logger.info(f"PDF文本提取完成，共 {len(text)} 字符")

        if len(text.strip()) < self.config.min_text_length:
            raise NoTextLayerError(
                "No readable text extracted. This PDF may be scanned images (no embedded text). "
                "Try a text-based PDF."
            )
        return text
