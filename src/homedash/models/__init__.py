from .icon import IconConfig, ImageIcon, LucideIcon, EmojiIcon, IMAGE_EXTENSIONS, ICONS_PREFIX
from .category import Category, CategoryCreate, CategoryUpdate
from .service import Service, ServiceCreate, ServiceUpdate, APP_LOGO_ID
from .dashboard import (
    DashboardConfig,
    AppSettings,
    AppSettingsUpdate,
    integrity_errors,
)
