# nextgenfit/database.py

from databases import Database

from nextgenfit.core.config import DATABASE_URL

database = Database(DATABASE_URL)
