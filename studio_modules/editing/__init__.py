"""Editing job lifecycle from the queue through client review to delivery."""
