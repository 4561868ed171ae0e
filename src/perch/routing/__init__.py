"""Routing — regex routes declared on Application subclasses.

Route definitions are collected when the class is created and bound to
each instance; dispatch scans them in registration order.
"""
