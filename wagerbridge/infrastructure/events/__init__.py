"""
Event infrastructure: the in-process bus behind DomainEventPublisher.
"""
