"""
Read-only export of enabled permissions, addressed by project API key.
"""
