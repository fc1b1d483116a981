# Services package init
"""
Posts & Comments API — Services Layer
=======================================

Service Inventory:
    - Collection (protocol): find / find_by_id / create /
      find_by_id_and_update / find_by_id_and_delete
    - SqlCollection: Collection over one SQLAlchemy model
    - ResourceController: generic CRUD request handling over a Collection
"""
