"""Built-in template catalog.

Registration order matters: matching returns the first template per
language whose confidence clears the threshold.
"""

from typing import List

from ..models import CodeTemplate, TemplateExample, TemplateVariable

JS_FUNCTION = CodeTemplate(
    id="js-function-basic",
    name="Function",
    description="Create a function that returns a value",
    language="javascript",
    pattern="create.*function|write.*function",
    template="function {{functionName}}({{parameters}}) {\n  {{functionBody}}\n}",
    variables=[
        TemplateVariable(name="functionName", description="Name of the function", required=True),
        TemplateVariable(name="parameters", description="Function parameters", default_value=""),
        TemplateVariable(name="functionBody", description="Function implementation", required=True),
    ],
    examples=[
        TemplateExample(
            description="Simple greeting function",
            variables={
                "functionName": "greet",
                "parameters": "name",
                "functionBody": "return `Hello, ${name}!`;",
            },
            output="function greet(name) {\n  return `Hello, ${name}!`;\n}",
        )
    ],
)

JS_CLASS = CodeTemplate(
    id="js-class-basic",
    name="Class",
    description="Create a class with a constructor and methods",
    language="javascript",
    pattern="create.*class|write.*class",
    template=(
        "class {{className}} {\n"
        "  constructor({{constructorParams}}) {\n"
        "    {{constructorBody}}\n"
        "  }\n"
        "\n"
        "{{#each methods}}  {{this}}() {}{{/each}}\n"
        "}"
    ),
    variables=[
        TemplateVariable(name="className", description="Name of the class", required=True),
        TemplateVariable(name="constructorParams", description="Constructor parameters", default_value=""),
        TemplateVariable(name="constructorBody", description="Constructor implementation", default_value=""),
        TemplateVariable(name="methods", type="array", description="Method names", default_value=[]),
    ],
    examples=[
        TemplateExample(
            description="Counter with two methods",
            variables={
                "className": "Counter",
                "constructorParams": "start",
                "constructorBody": "this.count = start;",
                "methods": ["increment", "reset"],
            },
            output=(
                "class Counter {\n"
                "  constructor(start) {\n"
                "    this.count = start;\n"
                "  }\n"
                "\n"
                "  increment() {}\n"
                "  reset() {}\n"
                "}"
            ),
        )
    ],
)

TS_INTERFACE = CodeTemplate(
    id="ts-interface-basic",
    name="Interface",
    description="Define an interface with typed properties",
    language="typescript",
    pattern="create.*interface|define.*interface",
    template="interface {{interfaceName}} {\n{{#each properties}}  {{this}};{{/each}}\n}",
    variables=[
        TemplateVariable(name="interfaceName", description="Name of the interface", required=True),
        TemplateVariable(
            name="properties", type="array", description="Property declarations", required=True
        ),
    ],
    examples=[
        TemplateExample(
            description="User record",
            variables={"interfaceName": "User", "properties": ["id: number", "name: string"]},
            output="interface User {\n  id: number;\n  name: string;\n}",
        )
    ],
)

TS_TYPE = CodeTemplate(
    id="ts-type-basic",
    name="Type Alias",
    description="Define a type alias for a union or object type",
    language="typescript",
    pattern="create.*type|define.*type",
    template="type {{typeName}} = {{typeDefinition}};",
    variables=[
        TemplateVariable(name="typeName", description="Name of the type", required=True),
        TemplateVariable(name="typeDefinition", description="Type definition", required=True),
    ],
    examples=[
        TemplateExample(
            description="String union",
            variables={"typeName": "Status", "typeDefinition": "'active' | 'inactive'"},
            output="type Status = 'active' | 'inactive';",
        )
    ],
)

PY_FUNCTION = CodeTemplate(
    id="py-function-basic",
    name="Function",
    description="Create a Python function with a docstring",
    language="python",
    pattern="create.*function|write.*function",
    template=(
        "def {{functionName}}({{parameters}}):\n"
        '{{#if functionDocstring}}    """{{functionDocstring}}"""\n{{/if}}'
        "    {{functionBody}}"
    ),
    variables=[
        TemplateVariable(name="functionName", description="Name of the function", required=True),
        TemplateVariable(name="parameters", description="Function parameters", default_value=""),
        TemplateVariable(name="functionDocstring", description="Function docstring", default_value=""),
        TemplateVariable(name="functionBody", description="Function implementation", required=True),
    ],
    examples=[
        TemplateExample(
            description="Documented addition",
            variables={
                "functionName": "add",
                "parameters": "a, b",
                "functionDocstring": "Return the sum of a and b.",
                "functionBody": "return a + b",
            },
            output='def add(a, b):\n    """Return the sum of a and b."""\n    return a + b',
        ),
        TemplateExample(
            description="Undocumented no-op",
            variables={
                "functionName": "noop",
                "parameters": "",
                "functionDocstring": "",
                "functionBody": "pass",
            },
            output="def noop():\n    pass",
        ),
    ],
)

REACT_COMPONENT = CodeTemplate(
    id="react-component-basic",
    name="React Component",
    description="Create a React functional component",
    language="typescript",
    framework="react",
    pattern="create.*component|write.*component",
    template="""import React from 'react';

interface {{componentName}}Props {
  {{props}}
}

export const {{componentName}}: React.FC<{{componentName}}Props> = ({{propsDestructured}}) => {
  return (
    <div>
      {{componentBody}}
    </div>
  );
};

export default {{componentName}};""",
    variables=[
        TemplateVariable(name="componentName", description="Name of the component", required=True),
        TemplateVariable(name="props", description="Component props interface", default_value=""),
        TemplateVariable(name="propsDestructured", description="Destructured props", default_value=""),
        TemplateVariable(name="componentBody", description="Component JSX content", required=True),
    ],
    examples=[
        TemplateExample(
            description="Greeting component",
            variables={
                "componentName": "Greeting",
                "props": "name: string;",
                "propsDestructured": "{ name }",
                "componentBody": "Hello, {name}!",
            },
            output="""import React from 'react';

interface GreetingProps {
  name: string;
}

export const Greeting: React.FC<GreetingProps> = ({ name }) => {
  return (
    <div>
      Hello, {name}!
    </div>
  );
};

export default Greeting;""",
        )
    ],
)

NEXTJS_PAGE = CodeTemplate(
    id="nextjs-page-basic",
    name="Next.js Page",
    description="Create a Next.js page component",
    language="typescript",
    framework="nextjs",
    pattern="create.*page|write.*page",
    template="""import { NextPage } from 'next';

interface {{pageName}}Props {
  {{props}}
}

const {{pageName}}: NextPage<{{pageName}}Props> = ({{propsDestructured}}) => {
  return (
    <div className="container mx-auto px-4">
      <h1>{{pageTitle}}</h1>
      {{pageContent}}
    </div>
  );
};

export default {{pageName}};""",
    variables=[
        TemplateVariable(name="pageName", description="Name of the page", required=True),
        TemplateVariable(name="props", description="Page props interface", default_value=""),
        TemplateVariable(name="propsDestructured", description="Destructured props", default_value=""),
        TemplateVariable(name="pageTitle", description="Page title", required=True),
        TemplateVariable(name="pageContent", description="Page content", required=True),
    ],
    examples=[
        TemplateExample(
            description="About page",
            variables={
                "pageName": "AboutPage",
                "props": "title: string;",
                "propsDestructured": "{ title }",
                "pageTitle": "{title}",
                "pageContent": "<p>Welcome</p>",
            },
            output="""import { NextPage } from 'next';

interface AboutPageProps {
  title: string;
}

const AboutPage: NextPage<AboutPageProps> = ({ title }) => {
  return (
    <div className="container mx-auto px-4">
      <h1>{title}</h1>
      <p>Welcome</p>
    </div>
  );
};

export default AboutPage;""",
        )
    ],
)

BUILTIN_TEMPLATES = [
    JS_FUNCTION,
    JS_CLASS,
    TS_INTERFACE,
    TS_TYPE,
    PY_FUNCTION,
    REACT_COMPONENT,
    NEXTJS_PAGE,
]


def builtin_templates() -> List[CodeTemplate]:
    """Fresh copies of the built-in catalog in registration order."""
    return [template.model_copy(deep=True) for template in BUILTIN_TEMPLATES]
