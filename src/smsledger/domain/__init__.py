"""Domain layer for smsledger: entities, extraction and ledger services.

Services are imported from their modules directly (``smsledger.domain.ledger``
and so on) so that the database layer can import entities without pulling in
the services that depend on it.
"""
