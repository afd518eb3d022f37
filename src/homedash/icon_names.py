# src/homedash/icon_names.py
"""Fixed catalog of Lucide icon names accepted for `icon`-type IconConfigs.

Names are stored in their canonical PascalCase form. Lookups are
case-insensitive and also accept kebab-case (`map-pin`), snake_case and the
`<Name>Icon` / `Lucide<Name>` aliases exported by the Lucide packages.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

LUCIDE_ICON_NAMES: Tuple[str, ...] = (
    "Activity", "Airplay", "AlarmClock", "Album", "AlertCircle", "AlertTriangle",
    "AlignJustify", "Anchor", "Aperture", "AppWindow", "Apple", "Archive",
    "ArrowDown", "ArrowLeft", "ArrowRight", "ArrowUp", "AtSign", "Award",
    "Baby", "Backpack", "BadgeCheck", "Banknote", "BarChart", "BarChart2",
    "Battery", "BatteryCharging", "Beaker", "Bed", "Beer", "Bell", "BellRing",
    "Bike", "Binary", "Bitcoin", "Blocks", "Bluetooth", "Bold", "Bolt", "Bomb",
    "Book", "BookMarked", "BookOpen", "Bookmark", "Bot", "Box", "Boxes",
    "Brain", "Briefcase", "Brush", "Bug", "Building", "Building2", "Bus",
    "Cable", "Cake", "Calculator", "Calendar", "CalendarDays", "Camera", "Car",
    "Cast", "Cat", "ChartBar", "ChartLine", "ChartPie", "Check", "CheckCircle",
    "ChefHat", "Cherry", "ChevronDown", "ChevronLeft", "ChevronRight",
    "ChevronUp", "Chrome", "Circle", "CircleDot", "Clapperboard", "Clipboard",
    "ClipboardList", "Clock", "Cloud", "CloudCog", "CloudDownload", "CloudRain",
    "CloudSun", "CloudUpload", "Code", "Code2", "Codepen", "Codesandbox",
    "Coffee", "Cog", "Coins", "Command", "Compass", "Component", "Computer",
    "Container", "Contact", "Cookie", "Copy", "Cpu", "CreditCard", "Crown",
    "Cuboid", "Database", "DatabaseBackup", "Delete", "Diamond", "Dice5",
    "Disc", "Dna", "Dog", "DollarSign", "Download", "DownloadCloud", "Dribbble",
    "Droplet", "Drum", "Dumbbell", "Ear", "Earth", "Edit", "Egg", "Eye",
    "EyeOff", "Facebook", "Factory", "Fan", "Feather", "File", "FileArchive",
    "FileAudio", "FileCode", "FileImage", "FileText", "FileVideo", "Files",
    "Film", "Filter", "Fingerprint", "Flag", "Flame", "Flashlight", "FlaskConical",
    "Flower", "Folder", "FolderGit", "FolderOpen", "Footprints", "Forklift",
    "Frame", "Gamepad", "Gamepad2", "Gauge", "Gem", "Ghost", "Gift", "GitBranch",
    "GitCommit", "GitFork", "GitMerge", "GitPullRequest", "Github", "Gitlab",
    "Glasses", "Globe", "Globe2", "GraduationCap", "Grid", "Grip", "Guitar",
    "Hammer", "HandHeart", "HardDrive", "HardDriveDownload", "HardDriveUpload",
    "Hash", "Headphones", "Heart", "HeartPulse", "HelpCircle", "Hexagon",
    "History", "Home", "Hospital", "Hourglass", "House", "Image", "ImageOff",
    "Images", "Inbox", "Infinity", "Info", "Instagram", "Joystick", "Key",
    "KeyRound", "Keyboard", "Lamp", "Landmark", "Languages", "Laptop",
    "Layers", "Layout", "LayoutDashboard", "LayoutGrid", "Leaf", "Library",
    "LifeBuoy", "Lightbulb", "Link", "Link2", "Linkedin", "List", "ListChecks",
    "ListTodo", "Loader", "Lock", "LockKeyhole", "LogIn", "LogOut", "Luggage",
    "Magnet", "Mail", "MailOpen", "Map", "MapPin", "Martini", "Maximize",
    "Medal", "Megaphone", "Menu", "MessageCircle", "MessageSquare", "Mic",
    "Microscope", "Microwave", "Milestone", "Minus", "Monitor", "MonitorPlay",
    "MonitorSmartphone", "Moon", "Mountain", "Mouse", "Music", "Music2",
    "Navigation", "Network", "Newspaper", "Notebook", "NotebookPen", "Package",
    "Package2", "Paintbrush", "Palette", "PanelsTopLeft", "Paperclip",
    "PawPrint", "Pen", "PenTool", "Pencil", "Percent", "PersonStanding",
    "Phone", "PictureInPicture", "PieChart", "PiggyBank", "Pill", "Pin",
    "Pizza", "Plane", "Play", "PlayCircle", "Plug", "Plus", "Podcast", "Power",
    "Printer", "Puzzle", "QrCode", "Radar", "Radio", "RadioTower", "Receipt",
    "Recycle", "RefreshCw", "Repeat", "Rocket", "Rss", "Ruler", "Satellite",
    "Save", "Scale", "Scan", "School", "Scissors", "ScreenShare", "Search",
    "Send", "Server", "ServerCog", "Settings", "Settings2", "Share", "Share2",
    "Shield", "ShieldCheck", "ShieldHalf", "Ship", "ShoppingBag",
    "ShoppingCart", "Shuffle", "Sigma", "Signal", "Siren", "Slack",
    "SlidersHorizontal", "Smartphone", "Smile", "Sofa", "Speaker", "Sparkles",
    "Sprout", "Square", "SquareTerminal", "Star", "Stethoscope", "Store",
    "Sun", "Sunrise", "Sunset", "Swords", "Table", "Tablet", "Tag", "Tags",
    "Target", "Tent", "Terminal", "TestTube", "Thermometer", "ThumbsUp",
    "Ticket", "Timer", "ToggleLeft", "ToggleRight", "Toolbox", "TrainFront",
    "Trash", "Trash2", "TreePine", "TrendingUp", "Trophy", "Truck", "Tv",
    "Tv2", "Twitch", "Twitter", "Umbrella", "Unlock", "Upload", "UploadCloud",
    "Usb", "User", "UserCog", "UserRound", "Users", "Utensils", "Vault",
    "Video", "Voicemail", "Volume2", "Vote", "Wallet", "Wand", "Wand2",
    "Warehouse", "Watch", "Waves", "Webcam", "Webhook", "Wifi", "WifiOff",
    "Wind", "Wine", "Workflow", "Wrench", "X", "Youtube", "Zap",
)

_SEPARATORS = re.compile(r"[\s_\-]+")


def _key(name: str) -> str:
    return _SEPARATORS.sub("", name.strip()).lower()


_LOOKUP: Dict[str, str] = {_key(n): n for n in LUCIDE_ICON_NAMES}
_SORTED: List[str] = sorted(LUCIDE_ICON_NAMES, key=str.lower)


def resolve_icon_name(name: Optional[str]) -> Optional[str]:
    """
    Map user input to the canonical catalog name, or None when unknown.
    Resolving an already canonical name returns it unchanged.
    """
    if not name or not name.strip():
        return None
    key = _key(name)
    hit = _LOOKUP.get(key)
    if hit:
        return hit
    # Lucide also exports every icon as `<Name>Icon` and `Lucide<Name>`
    if key.startswith("lucide") and key[len("lucide"):] in _LOOKUP:
        return _LOOKUP[key[len("lucide"):]]
    if key.endswith("icon") and key[: -len("icon")] in _LOOKUP:
        return _LOOKUP[key[: -len("icon")]]
    return None


def is_valid_icon_name(name: Optional[str]) -> bool:
    return resolve_icon_name(name) is not None


def list_icon_names() -> List[str]:
    return list(_SORTED)


def search_icon_names(query: str, limit: int = 60) -> List[str]:
    """Substring search; names starting with the query sort first."""
    q = _key(query or "")
    if not q:
        return _SORTED[:limit]
    matches = [n for n in _SORTED if q in n.lower()]
    matches.sort(key=lambda n: (not n.lower().startswith(q), n.lower()))
    return matches[:limit]
