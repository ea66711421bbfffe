"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos (psutil,
  subprocess).
- Permite invertir dependencias: el Core depende de abstracciones y los tests
  pueden inyectar dobles sin tocar la red ni lanzar procesos.
"""
