"""
Common definitions shared by the roomchat server and client.
"""
