"""
Persistence package: exposes the DBStorage singleton as `models.storage`.
The Flask factory rebinds it to the configured DATABASE_URL via reload().
"""
from models.db_storage import DBStorage

storage = DBStorage()
