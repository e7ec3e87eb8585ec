"""
RDF text samples for validator and parser tests.
"""

# Typed, referentially closed data: every object is defined or a W3C term.
CLEAN_TTL = """
@prefix ex: <http://ex.org/> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

ex:Users a rdfs:Class ; rdfs:label "Users" .
ex:Departments a rdfs:Class ; rdfs:label "Departments" .

<http://ex.org/departments/7> a ex:Departments ;
    <http://ex.org/departments#name> "Engineering"^^xsd:string .

<http://ex.org/users/1> a ex:Users ;
    <http://ex.org/users#name> "Ana"^^xsd:string ;
    <http://ex.org/users#age> "34"^^xsd:integer ;
    <http://ex.org/users#active> "true"^^xsd:boolean ;
    <http://ex.org/users#dept_id> <http://ex.org/departments/7> .
"""

BROKEN_REFERENCE_TTL = """
@prefix ex: <http://ex.org/> .

<http://ex.org/users/1> a ex:Users ;
    ex:worksIn <http://ex.org/departments/99> .
ex:Users a <http://www.w3.org/2000/01/rdf-schema#Class> .
"""

DATATYPE_MISMATCH_TTL = """
@prefix ex: <http://ex.org/> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

ex:a a ex:Thing ; ex:age "thirty"^^xsd:integer ; ex:flag "yes"^^xsd:boolean .
ex:b a ex:Thing ; ex:age "4.5"^^xsd:integer ; ex:flag "1"^^xsd:boolean .
ex:c a ex:Thing ; ex:size "12"^^xsd:unsignedShort .
ex:Thing a <http://www.w3.org/2000/01/rdf-schema#Class> .
"""

INCONSISTENT_TTL = """
@prefix ex: <http://ex.org/> .

ex:a a ex:Thing ; ex:name "one" , "uno" .
ex:b ex:name "untyped" .
ex:Thing a <http://www.w3.org/2000/01/rdf-schema#Class> .
"""

SUSPICIOUS_URI_NT = (
    '<http://ex.org/a|b> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> '
    '<http://www.w3.org/2000/01/rdf-schema#Class> .\n'
)

RELATIVE_URI_NT = (
    '<urn:isbn:12345> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> '
    '<http://www.w3.org/2000/01/rdf-schema#Class> .\n'
)

INVALID_SYNTAX_TTL = """
@prefix ex: <http://ex.org/> .
ex:a ex:b
"""

QUADS_NQ = """
<http://ex.org/a> <http://ex.org/p> "1" <http://ex.org/g1> .
<http://ex.org/b> <http://ex.org/p> "2" <http://ex.org/g2> .
<http://ex.org/c> <http://ex.org/p> "3" .
"""


def generate_subjects_ttl(count: int) -> str:
    """Turtle with ``count`` typed subjects of class ex:Item."""
    lines = [
        "@prefix ex: <http://ex.org/> .",
    ]
    for i in range(count):
        lines.append(f"<http://ex.org/items/{i}> a ex:Item .")
    return "\n".join(lines) + "\n"
