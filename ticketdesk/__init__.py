"""Ticketdesk Agent: natural-language ticket actions for support staff"""
