"""数据处理模块.""" 

"""
pdf_explainer/data/
├── __init__.py
├── models.py              # 数据模型定义
├── text_normalizer.py     # 文本规范化（空白折叠、引号统一、偏移映射）
├── context_locator.py     # 高亮上下文定位
├── pdf_extractor.py       # PDF文本提取（pdftotext）
└── report_generator.py    # 报告生成
"""
