"""Database Metadata — declarative base shared by models and schema initialization."""
