"""HTTP接口.

POST /api/explain 接收 multipart 表单：pdf（文件）、highlight、mode、readingLevel。
成功返回 {"output", "found", "readingLevel"}，失败返回 {"error"} 及对应状态码。
"""

from typing import Optional

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.concurrency import run_in_threadpool

from pdf_explainer import __version__
from pdf_explainer.app.processor import ExplainProcessor
from pdf_explainer.config.settings import settings

app = FastAPI(title="PDF Highlight Explainer", version=__version__)

_processor: Optional[ExplainProcessor] = None


def get_processor() -> ExplainProcessor:
    global _processor
    if _processor is None:
        _processor = ExplainProcessor()
    return _processor


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/api/explain")
async def explain(
    pdf: Optional[UploadFile] = File(default=None),
    highlight: str = Form(default=""),
    mode: str = Form(default="breakdown"),
    reading_level: str = Form(default="high", alias="readingLevel"),
) -> JSONResponse:
    """讲解上传PDF中的高亮文本."""
    if pdf is None:
        return JSONResponse({"error": "Missing PDF file"}, status_code=400)
    if not highlight.strip():
        return JSONResponse({"error": "Missing highlighted text"}, status_code=400)

    # 多读一个字节即可判断是否超限，避免把超大文件整个读进内存
    limit = settings.extraction.max_upload_bytes
    pdf_bytes = await pdf.read(limit + 1)
    logger.info(f"收到讲解请求: {pdf.filename} ({len(pdf_bytes)} 字节)")

    # 提取与大模型调用都是阻塞操作，放到线程池执行
    result = await run_in_threadpool(
        get_processor().process,
        pdf_bytes,
        highlight,
        mode.strip() or "breakdown",
        reading_level.strip() or "high",
    )

    if not result.success:
        return JSONResponse({"error": result.error_message or "Unknown server error"}, status_code=result.status_code)

    return JSONResponse({"output": result.output, "found": result.found, "readingLevel": result.reading_level})
