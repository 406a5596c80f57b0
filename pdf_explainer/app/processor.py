"""PDF高亮讲解应用."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from pdf_explainer.config.settings import settings
from pdf_explainer.data.context_locator import HighlightContextLocator
from pdf_explainer.data.models import ContextWindow
from pdf_explainer.data.pdf_extractor import PdfTextExtractor
from pdf_explainer.data.report_generator import ReportGenerator
from pdf_explainer.service.explanation_service import (
    ExplanationRequest,
    ExplanationService,
    Mode,
    ReadingLevel,
)
from pdf_explainer.utils.errors import ExplainerError, InvalidRequestError, PdfTooLargeError
from pdf_explainer.utils.logger import setup_logger

# 少于这个词数的高亮通常定位不准
MIN_HIGHLIGHT_WORDS = 3


@dataclass
class ExplainResult:
    """讲解结果."""

    output: str
    found: bool
    mode: str
    reading_level: str
    success: bool
    error_message: Optional[str] = None
    status_code: int = 200
    window: Optional[ContextWindow] = None

    @property
    def report(self) -> str:
        """生成结果报告.

        Returns:
            结果报告字符串
        """
        if not self.success:
            return f"Error: {self.error_message}"

        note = "" if self.found else (
            "\n\n(Note: the highlight was not found in the PDF; "
            "the explanation is based on the start of the document.)"
        )
        return f"{self.output}{note}"


def is_short_highlight(highlight: str) -> bool:
    """高亮是否过短（少于三个词）."""
    return len(highlight.split()) < MIN_HIGHLIGHT_WORDS


class ExplainProcessor:
    """PDF高亮讲解处理器.

    串联三个步骤：提取PDF文本、定位高亮上下文、调用大模型生成讲解。
    """

    def __init__(
        self,
        extractor: Optional[PdfTextExtractor] = None,
        locator: Optional[HighlightContextLocator] = None,
        explanation_service: Optional[ExplanationService] = None,
    ) -> None:
        """初始化处理器.

        Args:
            extractor: PDF文本提取器
            locator: 高亮上下文定位器
            explanation_service: 讲解生成服务，为None时在首次使用时创建
        """
        self.extractor = extractor or PdfTextExtractor()
        self.locator = locator or HighlightContextLocator()
        self._explanation_service = explanation_service
        logger.info("讲解处理器已初始化")

    @property
    def explanation_service(self) -> ExplanationService:
        # 延迟创建，缺少API密钥时才能作为请求失败返回
        if self._explanation_service is None:
            self._explanation_service = ExplanationService()
        return self._explanation_service

    def process(
        self,
        pdf_bytes: Optional[bytes],
        highlight: str,
        mode: str = Mode.BREAKDOWN.value,
        reading_level: str = ReadingLevel.HIGH.value,
    ) -> ExplainResult:
        """处理一次讲解请求.

        Args:
            pdf_bytes: PDF文件字节内容
            highlight: 用户高亮文本
            mode: 讲解模式
            reading_level: 阅读水平

        Returns:
            讲解结果
        """
        parsed_mode = Mode.parse(mode)
        parsed_level = ReadingLevel.parse(reading_level)
        highlight = (highlight or "").strip()

        try:
            if not pdf_bytes:
                raise InvalidRequestError("Missing PDF file")
            if not highlight:
                raise InvalidRequestError("Missing highlighted text")
            if len(pdf_bytes) > self.extractor.config.max_upload_bytes:
                limit_mb = self.extractor.config.max_upload_bytes // (1024 * 1024)
                raise PdfTooLargeError(f"PDF too large (max {limit_mb}MB)")
            if is_short_highlight(highlight):
                logger.warning(f"高亮少于 {MIN_HIGHLIGHT_WORDS} 个词，定位可能不准确")

            service = self.explanation_service

            logger.info(f"开始处理讲解请求: PDF {len(pdf_bytes)} 字节, 高亮 {len(highlight)} 字符")
            document_text = self.extractor.extract_text(pdf_bytes)

            window = self.locator.locate(document_text, highlight)
            if window.found:
                logger.info(f"已定位高亮，上下文 {len(window.text)} 字符")
            else:
                logger.warning("未在文档中找到高亮，使用文档开头作为上下文")

            output = service.explain(ExplanationRequest(
                highlight=highlight,
                context=window.text,
                mode=parsed_mode,
                reading_level=parsed_level,
            ))

            logger.info("讲解生成完成")
            return ExplainResult(
                output=output,
                found=window.found,
                mode=parsed_mode.value,
                reading_level=parsed_level.value,
                success=True,
                window=window,
            )

        except ExplainerError as e:
            logger.error(f"处理讲解请求失败: {e.message}")
            return self._failure(e.message, e.status_code, parsed_mode, parsed_level)
        except Exception as e:
            logger.exception(f"处理讲解请求时发生未知错误: {e}")
            return self._failure(str(e) or "Unknown server error", 500, parsed_mode, parsed_level)

    def process_file(
        self,
        pdf_path: str,
        highlight: str,
        mode: str = Mode.BREAKDOWN.value,
        reading_level: str = ReadingLevel.HIGH.value,
    ) -> ExplainResult:
        """读取本地PDF并处理讲解请求."""
        try:
            pdf_bytes = self.extractor.load_pdf(pdf_path)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"读取PDF失败: {e}")
            return self._failure(str(e), 400, Mode.parse(mode), ReadingLevel.parse(reading_level))
        return self.process(pdf_bytes, highlight, mode, reading_level)

    @staticmethod
    def _failure(message: str, status_code: int, mode: Mode, reading_level: ReadingLevel) -> ExplainResult:
        return ExplainResult(
            output="",
            found=False,
            mode=mode.value,
            reading_level=reading_level.value,
            success=False,
            error_message=message,
            status_code=status_code,
        )


# 命令行接口
app = typer.Typer()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="日志级别，默认读取 LOG_LEVEL"),
) -> None:
    """PDF高亮讲解工具."""
    if log_level:
        setup_logger(log_level)


@app.command()
def explain(
    pdf_path: str = typer.Argument(..., help="输入PDF路径"),
    highlight: str = typer.Argument(..., help="高亮文本（建议1-2个完整句子）"),
    mode: str = typer.Option(Mode.BREAKDOWN.value, help="讲解模式: quick / breakdown / example / assumptions"),
    reading_level: str = typer.Option(ReadingLevel.HIGH.value, help="阅读水平: middle / high / college / expert"),
    report_path: Optional[str] = typer.Option(None, help="讲解报告路径（Markdown），不指定则不生成"),
) -> None:
    """讲解PDF中的一段高亮文本."""
    if is_short_highlight(highlight):
        typer.echo(typer.style("Tip: highlights of 1-2 full sentences give the best results.", fg=typer.colors.YELLOW))

    processor = ExplainProcessor()
    result = processor.process_file(pdf_path, highlight, mode, reading_level)

    if not result.success:
        typer.echo(typer.style(result.report, fg=typer.colors.RED))
        raise typer.Exit(code=1)

    typer.echo(typer.style(result.report, fg=typer.colors.GREEN))

    if report_path:
        try:
            ReportGenerator().generate_report(
                highlight=highlight,
                window=result.window,
                output=result.output,
                mode=result.mode,
                reading_level=result.reading_level,
                output_path=Path(report_path),
            )
        except ValueError as e:
            typer.echo(typer.style(f"Error: {e}", fg=typer.colors.RED))
            raise typer.Exit(code=1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="监听地址，默认读取 SERVER_HOST"),
    port: Optional[int] = typer.Option(None, help="监听端口，默认读取 SERVER_PORT"),
) -> None:
    """启动HTTP服务."""
    import uvicorn

    uvicorn.run(
        "pdf_explainer.app.server:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
    )


if __name__ == "__main__":
    app()
