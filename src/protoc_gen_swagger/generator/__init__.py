"""Document generator -- build the Swagger 2.0 document from a Package.

This sub-package is responsible for the second half of the pipeline: taking a
:class:`~protoc_gen_swagger.models.Package` (produced by the parser) and
assembling the :class:`~protoc_gen_swagger.models.Document` written to
``<package>.json``.

Typical usage::

    from protoc_gen_swagger.generator import assemble, render

    document = assemble(package, config)
    text = render(document)

Sub-modules:

* :mod:`~protoc_gen_swagger.generator.schemas` -- Field schemas, map and
  array rendering, and lazily emitted definitions.
* :mod:`~protoc_gen_swagger.generator.params` -- Header, path, form, query and
  body parameter placement.
* :mod:`~protoc_gen_swagger.generator.routes` -- Route placeholders and the
  duplicate-checking route table.
* :mod:`~protoc_gen_swagger.generator.assembler` -- Tags, operations,
  responses and the final document.
"""

from protoc_gen_swagger.generator.assembler import assemble, document_filename, render

__all__ = ["assemble", "document_filename", "render"]
