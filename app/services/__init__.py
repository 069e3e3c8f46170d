# Services package init
"""
Inventory API - Services Layer
===============================

What:  Data access layer sitting between routes (HTTP) and MongoDB (persistence).
How:   Services accept validated payloads or raw mappings plus a collection
       handle, run the driver call, and return response models or raise
       application exceptions.

Service Inventory:
    - ProductService: create / list_all / get_by_id / update / delete
"""
