from .taxonomy import Taxonomy
from .position import Position
from .name_mapping import NameMapping
from .import_history import ImportHistory
from .app_setting import AppSetting
from .trade import Trade, TradeItem, Snapshot
from .research import CompanyResearch
