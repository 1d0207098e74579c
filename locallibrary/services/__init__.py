# Services package init
"""
Local Library: Services Layer
==============================

What:  Data access and write rules sitting between routes (HTTP) and models.
How:   One stateless service object per entity, used as a module-level
       singleton. Reads that do not depend on each other run through
       parallel.fetch_parallel, each on its own session.

Service Inventory:
    - AuthorService:        list, detail with books, create
    - BookService:          list, detail with copies, create/update, delete
    - BookInstanceService:  list, detail, create
    - GenreService:         list, detail with books, form options
    - catalog_service:      record counts for the home page
    - common:               storage error translation, identifier parsing
"""
