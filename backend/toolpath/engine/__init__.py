"""svg-toolpath lowering engine.

Entry points live in toolpath.engine.converter (convert_svg, svg_to_turtle).
"""
