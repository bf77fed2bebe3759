#!/usr/bin/env python3
"""
AI 概览富内容渲染 - CLI 入口

使用方法:
    python main.py pasted.html
    python main.py pasted.html --output ./overview.html --page
    python main.py pasted.html --collapsed --budget 800
    cat pasted.html | python main.py - -v
"""

from __future__ import annotations

import argparse
import io
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

# Fix Windows console encoding for emoji/CJK characters
if sys.platform == 'win32':
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')
    os.environ.setdefault('PYTHONIOENCODING', 'utf-8')

if __package__:
    from .config import OverviewConfig
    from .core import OverviewRenderer, RenderResult, build_preview_page
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent
    if str(PROJECT_ROOT) not in sys.path:
        sys.path.insert(0, str(PROJECT_ROOT))
    from overview.config import OverviewConfig
    from overview.core import OverviewRenderer, RenderResult, build_preview_page


def setup_logging(verbose: bool = False) -> None:
    """配置日志"""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def read_input(source: str) -> str:
    """读取输入内容（'-' 表示标准输入）"""
    if source == '-':
        return sys.stdin.read()

    path = Path(source)
    data = path.read_bytes()
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        return data.decode('gbk', errors='replace')


def print_result_summary(console: Console, result: RenderResult, config: OverviewConfig, output: Path | None) -> None:
    """打印结果摘要"""
    table = Table(title="Overview render")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Visible chars", str(result.visible_length))
    table.add_row("Budget", str(config.truncation_budget))
    table.add_row("Truncated", "yes" if result.was_truncated else "no")
    table.add_row("Images", str(result.image_count))
    table.add_row("Image rows", str(len(result.container_ids)))
    table.add_row("Paste artifacts", "stripped" if config.strip_platform_artifacts else "kept")
    if output is not None:
        table.add_row("Output", str(output))

    console.print(table)


def main() -> int:
    """主函数"""
    parser = argparse.ArgumentParser(
        description='将粘贴的 AI Overview 富文本渲染为安全的 HTML 标记',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
图片记号:
  [https://example.com/image.jpg]                    单张图片
  {[https://a.com/1.jpg][https://a.com/2.png]}       横向滚动图片行

环境变量:
  OVERVIEW_TRUNCATION_BUDGET      折叠预览预算 (默认: 750)
  OVERVIEW_STRIP_PASTE_ARTIFACTS  是否清除平台粘贴残留 (默认: 1)
  OVERVIEW_HIGHLIGHT_COLOR        黄色高亮替换色 (默认: #d3e3fd)
  OVERVIEW_CONFIG_FILE            JSON 配置文件路径
"""
    )

    parser.add_argument(
        'input',
        type=str,
        help="输入文件路径，'-' 表示标准输入"
    )

    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=None,
        help='输出文件 (默认: 打印到标准输出)'
    )

    parser.add_argument(
        '--budget', '-b',
        type=int,
        default=None,
        help='折叠预览的可见字符预算'
    )

    parser.add_argument(
        '--collapsed',
        action='store_true',
        help='输出折叠（截断）后的预览'
    )

    parser.add_argument(
        '--page',
        action='store_true',
        help='输出完整的预览页 HTML，而不是片段'
    )

    parser.add_argument(
        '--keep-paste-artifacts',
        action='store_true',
        help='保留 class/id/aria-* 等平台粘贴残留'
    )

    parser.add_argument(
        '--highlight-color',
        type=str,
        default=None,
        help='黄色高亮替换色'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='输出详细日志'
    )

    args = parser.parse_args()

    setup_logging(args.verbose)
    console = Console(stderr=True)

    if args.input != '-' and not Path(args.input).exists():
        console.print(f"[red]❌ 错误: 输入文件不存在: {args.input}[/red]")
        return 1

    try:
        config = OverviewConfig.resolve(
            truncation_budget=args.budget,
            strip_platform_artifacts=False if args.keep_paste_artifacts else None,
            highlight_color=args.highlight_color,
        )
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]❌ 配置错误: {e}[/red]")
        return 1

    try:
        raw = read_input(args.input)

        renderer = OverviewRenderer(config)
        if args.collapsed:
            result = renderer.render_truncated(raw, config.truncation_budget)
        else:
            result = renderer.render(raw)

        output_text = build_preview_page(result, highlight_color=config.highlight_color) if args.page else result.markup

        if args.output is None:
            sys.stdout.write(output_text)
            if not output_text.endswith('\n'):
                sys.stdout.write('\n')
        else:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_text, encoding='utf-8')

        print_result_summary(console, result, config, args.output)
        return 0

    except KeyboardInterrupt:
        console.print("\n⚠️ 用户取消操作")
        return 130

    except Exception as e:
        logging.exception("渲染失败")
        console.print(f"[red]❌ 渲染失败: {e}[/red]")
        return 1


if __name__ == '__main__':
    sys.exit(main())
