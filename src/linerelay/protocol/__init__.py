"""
Wire framing used on both sides of a relay: one line of bytes terminated by a single newline.
"""
