"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2): el documento `.env`
  línea a línea y los pasos de instalación.
- El dominio no conoce subprocess, psutil ni la CLI.
"""
