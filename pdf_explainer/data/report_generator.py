"""报告生成器."""

from pathlib import Path
from typing import Union

from loguru import logger

from pdf_explainer.data.models import ContextWindow


class ReportGenerator:
    """报告生成器."""

    def generate_report(
        self,
        highlight: str,
        window: ContextWindow,
        output: str,
        mode: str,
        reading_level: str,
        output_path: Union[str, Path],
    ) -> None:
        """生成讲解报告.

        Args:
            highlight: 用户高亮文本
            window: 定位得到的上下文窗口
            output: 大模型生成的讲解
            mode: 讲解模式
            reading_level: 阅读水平
            output_path: 输出文件路径
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write("# PDF Highlight Explanation\n\n")
                f.write(f"- Mode: {mode}\n")
                f.write(f"- Reading level: {reading_level}\n")
                if window.found:
                    f.write(f"- Highlight located: yes ({window.strategy}, chars {window.start}-{window.end})\n\n")
                else:
                    f.write("- Highlight located: no (context is the start of the document)\n\n")

                f.write("## Highlight\n\n")
                for line in highlight.strip().splitlines():
                    f.write(f"> {line}\n")
                f.write("\n## Explanation\n\n")
                f.write(f"{output.strip()}\n\n")
                f.write("---\n\n")
                f.write("<details><summary>Context</summary>\n\n")
                f.write(f"```text\n{window.text}\n```\n\n")
                f.write("</details>\n")

            logger.info(f"已生成讲解报告: {output_path}")
        except Exception as e:
            logger.error(f"生成讲解报告失败: {e}")
            raise ValueError(f"生成讲解报告失败: {e}")
