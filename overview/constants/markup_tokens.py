#!/usr/bin/env python3
"""
概览内容标记常量

图片记号语法、括号变体、生成标记的 class 名，以及清洗规则用到的
标签/属性/样式白名单。
"""

# 图片链接允许的扩展名（大小写不敏感）
IMAGE_EXTENSIONS = ('jpg', 'jpeg', 'png', 'gif', 'webp', 'svg', 'bmp')

# 分组括号变体，按扫描顺序：普通括号、数字引用、命名引用
BRACE_VARIANTS = {
    'brace': ('{', '}'),
    'numeric': ('&#123;', '&#125;'),
    'named': ('&lbrace;', '&rbrace;'),
}

# 默认截断预算（可见字符数）
DEFAULT_TRUNCATION_BUDGET = 750

# 黄色高亮统一替换成的强调色
DEFAULT_HIGHLIGHT_COLOR = '#d3e3fd'

# 生成标记的 class / id
HIGHLIGHT_CLASS = 'ai-highlight'
IMAGE_ROW_CLASS = 'ai-image-row'
IMAGE_ROW_TRACK_CLASS = 'ai-image-row-track'
IMAGE_ROW_ITEM_CLASS = 'ai-image-row-item'
IMAGE_SINGLE_CLASS = 'ai-image-single'
IMAGE_CLASS = 'ai-image'
IMAGE_ROW_ID_PREFIX = 'ai-image-row'

# 连同内容一起删除的标签
BLOCKED_TAGS = (
    'script', 'style', 'iframe', 'frame', 'frameset', 'object', 'embed',
    'applet', 'noscript', 'template', 'svg', 'math', 'link', 'meta', 'base',
    'head', 'title',
)

# 交互控件
INTERACTIVE_TAGS = (
    'form', 'input', 'button', 'select', 'option', 'optgroup', 'textarea',
    'datalist', 'output', 'dialog',
)

# 粘贴时带进来的外壳标签：去掉标签、保留子节点
WRAPPER_TAGS = ('html', 'body')

# 追踪 / 自动化属性
TRACKING_ATTRIBUTES = frozenset({
    'ping', 'ved', 'jsaction', 'jscontroller', 'jsname', 'jsmodel', 'jslog',
    'jsdata', 'jsrenderer', 'jsshadow', 'jsowner', 'jsuid',
})

# 平台排版残留属性（开启 strip_platform_artifacts 时删除）
PLATFORM_ATTRIBUTES = frozenset({
    'class', 'id', 'role', 'tabindex', 'dir', 'lang', 'contenteditable',
    'draggable', 'spellcheck', 'translate', 'autofocus',
})

# 需要校验协议的 URL 属性
URL_ATTRIBUTES = frozenset({
    'href', 'src', 'action', 'formaction', 'poster', 'background', 'xlink:href',
})

SAFE_URL_SCHEMES = ('http', 'https', 'mailto')

# 允许保留的排版样式；以 "-" 结尾的按前缀匹配
ALLOWED_STYLE_PROPERTIES = (
    'font-weight',
    'font-size',
    'text-decoration',
    'text-decoration-',
    'margin',
    'margin-',
    'padding',
    'padding-',
    'line-height',
    'text-align',
)

# 文字用法说明（编辑页 / API 提示）
NOTATION_HELP = (
    'You can include images by pasting image URLs (jpg, jpeg, png, gif, webp, svg, bmp).',
    'Single image: [https://example.com/image.jpg]',
    'Horizontal row: {[image1.jpg][image2.jpg][image3.jpg]}',
    'Use curly braces {} to group images into scrollable rows',
)


def make_image_row_id(scope: str, index: int, prefix: str = IMAGE_ROW_ID_PREFIX) -> str:
    """生成图片行容器 id"""
    if scope:
        return f"{prefix}-{scope}-{index}"
    return f"{prefix}-{index}"


def is_allowed_style_property(name: str) -> bool:
    """样式属性是否在排版白名单内"""
    for allowed in ALLOWED_STYLE_PROPERTIES:
        if allowed.endswith('-'):
            if name.startswith(allowed):
                return True
        elif name == allowed:
            return True
    return False
