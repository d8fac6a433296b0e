
from .base import Adapter, AdapterOptions, LoadState
from .mysql import MySQLDaoAdapter, create_mysql_dao

__all__ = ["Adapter", "AdapterOptions", "LoadState", "MySQLDaoAdapter", "create_mysql_dao"]
