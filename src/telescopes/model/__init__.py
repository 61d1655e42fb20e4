"""
The MODEL layer contains pure data structures and geometry logic.
It has NO knowledge of rendering (matplotlib) or export formats beyond io.py.
It deals with Frames, Helices, Shell Parameters, and I/O.
"""
