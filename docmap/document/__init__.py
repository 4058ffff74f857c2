"""
Document module for mapping Python objects onto records of a schemaless document store.

This module provides functionality for:
- Declaring fields and associations on Document classes
- Callbacks and validation around saving
- Saving embedded Documents through their root record
- Querying, grouping and paginating Documents
- Binding Document classes to MongoDB collections
"""
