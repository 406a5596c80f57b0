"""项目配置设置."""

from dotenv import load_dotenv
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

# 先加载.env.example（最低优先级），再加载.env（覆盖前者），最后环境变量最高
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env.example', override=False)
load_dotenv(dotenv_path=Path(__file__).parent.parent.parent / '.env', override=True)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class LLMConfig(BaseModel):
    """大模型配置."""

    model_name: str = Field(default_factory=lambda: os.environ.get("LLM_MODEL_NAME", "gpt-4.1-mini"))  # 使用的大模型名称
    api_key: Optional[str] = Field(default_factory=lambda: os.environ.get("OPENAI_API_KEY"))  # 大模型API密钥
    api_base_url: Optional[str] = Field(default_factory=lambda: os.environ.get("OPENAI_API_BASE"))  # API基础URL，为空时使用官方地址
    max_tokens: int = Field(default_factory=lambda: int(os.environ.get("MAX_TOKENS", "800")))  # 生成的最大token数
    temperature: float = Field(default_factory=lambda: float(os.environ.get("TEMPERATURE", "0.3")))  # 生成多样性（温度）
    timeout: int = Field(default_factory=lambda: int(os.environ.get("TIMEOUT", "60")))  # API请求超时时间（秒）
    system_message: str = Field(default_factory=lambda: os.environ.get(
        "SYSTEM_MESSAGE", "You are an accessibility-focused reading assistant."
    ))

    # 提示词相关配置
    prompt_template: str = Field(default_factory=lambda: os.environ.get("PROMPT_TEMPLATE", """
READING LEVEL:
{level_instructions}

MODE INSTRUCTIONS:
{mode_instructions}

HIGHLIGHT (what the user selected):
{highlight}

CONTEXT (from the PDF):
{context}
"""))  # 大模型提示词模板
    prompts_file: Path = Field(default_factory=lambda: Path(os.environ.get(
        "PROMPTS_FILE", str(Path(__file__).parent / "prompts.yaml")
    )))  # 讲解模式与阅读水平指令文件


class LocatorConfig(BaseModel):
    """高亮上下文定位配置."""

    min_highlight_length: int = Field(default_factory=lambda: int(os.environ.get("MIN_HIGHLIGHT_LENGTH", "8")), ge=1)  # 可用高亮的最小长度（规范化后）
    probe_length: int = Field(default_factory=lambda: int(os.environ.get("PROBE_LENGTH", "140")), ge=1)  # 重试时截取的高亮前缀长度
    context_radius: int = Field(default_factory=lambda: int(os.environ.get("CONTEXT_RADIUS", "1200")), ge=0)  # 匹配位置前后扩展的字符数
    max_context_length: int = Field(default_factory=lambda: int(os.environ.get("MAX_CONTEXT_LENGTH", "4000")), ge=1)  # 上下文窗口最大长度
    fallback_context_length: int = Field(default_factory=lambda: int(os.environ.get("FALLBACK_CONTEXT_LENGTH", "3500")), ge=1)  # 未命中时取文档开头的字符数
    anchor_prefix_length: int = Field(default_factory=lambda: int(os.environ.get("ANCHOR_PREFIX_LENGTH", "24")), ge=1)  # 原文直接搜索时使用的高亮前缀长度
    use_offset_map: bool = Field(default_factory=lambda: _env_bool("USE_OFFSET_MAP", "true"))  # 是否使用偏移映射表回溯原文位置


class ExtractionConfig(BaseModel):
    """PDF文本提取配置."""

    pdftotext_path: Optional[str] = Field(default_factory=lambda: os.environ.get("PDFTOTEXT_PATH"))  # pdftotext可执行文件路径
    timeout: int = Field(default_factory=lambda: int(os.environ.get("EXTRACTION_TIMEOUT", "20")))  # 提取超时时间（秒）
    max_upload_bytes: int = Field(default_factory=lambda: int(os.environ.get("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024))))  # 上传PDF大小上限
    min_text_length: int = Field(default_factory=lambda: int(os.environ.get("MIN_TEXT_LENGTH", "30")))  # 可读文本的最小长度


class ServerConfig(BaseModel):
    """HTTP服务配置."""

    host: str = Field(default_factory=lambda: os.environ.get("SERVER_HOST", "127.0.0.1"))
    port: int = Field(default_factory=lambda: int(os.environ.get("SERVER_PORT", "8000")))


class LogConfig(BaseModel):
    """日志配置."""

    level: str = Field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))  # 日志级别
    # 精简日志格式
    format: str = Field(default_factory=lambda: os.environ.get("LOG_FORMAT", "<level>{level: <8}</level>| - <level>{message}</level>"))
    log_file: Optional[str] = Field(default_factory=lambda: os.environ.get("LOG_FILE", "pdf_explainer.log"))  # 日志文件名
    rotation: str = Field(default_factory=lambda: os.environ.get("LOG_ROTATION", "10 MB"))  # 日志轮转大小
    retention: str = Field(default_factory=lambda: os.environ.get("LOG_RETENTION", "1 week"))  # 日志保留时间


class Settings(BaseModel):
    """项目全局设置."""

    llm: LLMConfig = Field(default_factory=LLMConfig)  # 大模型相关配置
    locator: LocatorConfig = Field(default_factory=LocatorConfig)  # 上下文定位相关配置
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)  # PDF提取相关配置
    server: ServerConfig = Field(default_factory=ServerConfig)  # HTTP服务相关配置
    log: LogConfig = Field(default_factory=LogConfig)  # 日志相关配置

    # 项目路径配置
    project_dir: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)  # 项目根目录
    output_dir: Path = Field(default_factory=lambda: Path(os.environ.get("OUTPUT_DIR", str(Path(__file__).parent.parent.parent / "output"))))  # 输出目录


# 单例模式，避免多次实例化
_settings = None
def get_settings():
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

settings = get_settings()

# 确保输出目录存在
settings.output_dir.mkdir(exist_ok=True, parents=True)
