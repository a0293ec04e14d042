"""Core data models for the copilot engine."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


# --- Analysis -----------------------------------------------------------------


class CodeFile(BaseModel):
    """A source file submitted for analysis."""

    path: str
    content: str
    language: str
    size: int = 0
    last_modified: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_source(cls, content: str, language: str, path: str = "temp") -> "CodeFile":
        """Wrap an in-memory snippet as a CodeFile."""
        return cls(path=path, content=content, language=language, size=len(content))


class Location(BaseModel):
    """Character span inside a file."""

    start: int = 0
    end: int = 0


class Pattern(BaseModel):
    """A recognised structural unit (function, class, ...)."""

    type: str
    name: str
    confidence: float = Field(ge=0.0, le=1.0)
    location: Location = Field(default_factory=Location)


class IssueLocation(BaseModel):
    """1-based line and 0-based column of an issue."""

    line: int
    column: int = 0


class CodeIssue(BaseModel):
    """Advisory lint-style finding. Never blocks generation."""

    type: Literal["error", "warning", "info"]
    message: str
    severity: int = 1
    location: IssueLocation
    suggestion: Optional[str] = None


class AnalysisResult(BaseModel):
    """Derived analysis of a single file."""

    path: str = ""
    language: str = ""
    line_count: int = 0
    ast: Any = None  # parser-defined, see copilot.parsers.models.SyntaxNode
    dependencies: List[str] = Field(default_factory=list)
    exports: List[str] = Field(default_factory=list)
    imports: List[str] = Field(default_factory=list)
    complexity: int = Field(default=1, ge=0)
    patterns: List[Pattern] = Field(default_factory=list)
    issues: List[CodeIssue] = Field(default_factory=list)


class AnalysisStructure(BaseModel):
    """Project-level shape summary."""

    total_files: int = 0
    total_lines: int = 0
    languages: List[str] = Field(default_factory=list)


class ProjectMetrics(BaseModel):
    total_complexity: int = 0
    average_complexity: float = 0.0
    file_count: int = 0
    total_issues: int = 0


class ProjectAnalysis(BaseModel):
    """Aggregated analysis over a batch of files."""

    files: List[AnalysisResult] = Field(default_factory=list)
    structure: AnalysisStructure = Field(default_factory=AnalysisStructure)
    patterns: List[Pattern] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    metrics: ProjectMetrics = Field(default_factory=ProjectMetrics)
    failures: Dict[str, str] = Field(default_factory=dict)


# --- Project context ----------------------------------------------------------


class ProjectFile(CodeFile):
    """A file belonging to a scanned project."""


class ProjectDependency(BaseModel):
    name: str
    version: str = "*"
    type: Literal["dev", "prod"] = "prod"


class ProjectConfig(BaseModel):
    """Parsed project configuration files."""

    package_json: Optional[Dict[str, Any]] = None
    ts_config: Optional[Dict[str, Any]] = None
    tailwind_config: Optional[str] = None
    other_configs: Dict[str, Any] = Field(default_factory=dict)


class ProjectStructure(BaseModel):
    root: str
    files: List[ProjectFile] = Field(default_factory=list)
    dependencies: List[ProjectDependency] = Field(default_factory=list)
    config: ProjectConfig = Field(default_factory=ProjectConfig)


class ProjectContext(BaseModel):
    """Language, framework and dependency summary of a project."""

    language: str
    framework: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    structure: ProjectStructure


class UserPreferences(BaseModel):
    preferred_language: str = "typescript"
    code_style: Literal["functional", "object-oriented", "procedural"] = "functional"
    comment_style: Literal["detailed", "minimal", "none"] = "detailed"
    testing_framework: Optional[str] = "jest"
    linter: Optional[str] = "eslint"


class UserHistory(BaseModel):
    """Bounded, most-recent-first history of a user's activity."""

    recent_prompts: List[str] = Field(default_factory=list)
    preferred_patterns: List[str] = Field(default_factory=list)
    common_mistakes: List[str] = Field(default_factory=list)


class CodeContext(BaseModel):
    """Caller-supplied (and later enriched) context for a generation request."""

    current_file: Optional[str] = None
    surrounding_code: Optional[str] = None
    related_files: List[str] = Field(default_factory=list)
    project_structure: Optional[ProjectStructure] = None
    user_preferences: Optional[UserPreferences] = None
    user_id: Optional[str] = None


class ContextWindow(BaseModel):
    """Everything assembled around a request before generation."""

    current_file: str = ""
    surrounding_code: str = ""
    related_files: List[str] = Field(default_factory=list)
    project_context: ProjectContext
    user_history: UserHistory


# --- Generation ---------------------------------------------------------------


class GenerationOptions(BaseModel):
    include_tests: Optional[bool] = None
    include_comments: Optional[bool] = None
    style_guide: Optional[str] = None
    complexity: Optional[Literal["simple", "medium", "complex"]] = None


class CodeGenerationRequest(BaseModel):
    prompt: str
    language: str
    framework: Optional[str] = None
    context: Optional[CodeContext] = None
    options: Optional[GenerationOptions] = None


class AIRequest(BaseModel):
    """Prompt pair handed to the AI-backed generator."""

    prompt: str
    system: str
    options: Optional[GenerationOptions] = None


class GenerationMetadata(BaseModel):
    model: str
    tokens_used: int = 0
    processing_time: float = 0.0  # milliseconds


class GeneratedCode(BaseModel):
    """Result of a generation request. Never persisted by the core."""

    code: str
    explanation: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    suggestions: List[str] = Field(default_factory=list)
    tests: Optional[str] = None
    metadata: Optional[GenerationMetadata] = None
    failure_reason: Optional[Literal["provider", "timeout"]] = None


# --- Templates ----------------------------------------------------------------


class TemplateVariable(BaseModel):
    name: str
    type: Literal["string", "number", "boolean", "array"] = "string"
    description: str = ""
    required: bool = False
    default_value: Any = None


class TemplateExample(BaseModel):
    description: str
    variables: Dict[str, Any] = Field(default_factory=dict)
    output: str


class CodeTemplate(BaseModel):
    """Parametrised code skeleton. Identity is the (id, language) pair."""

    id: str
    name: str
    description: str
    language: str
    framework: Optional[str] = None
    pattern: str = ""
    template: str
    variables: List[TemplateVariable] = Field(default_factory=list)
    examples: List[TemplateExample] = Field(default_factory=list)


VariableSource = Literal["extracted", "default"]


class TemplateMatch(BaseModel):
    """Outcome of scoring one prompt against one template."""

    template: CodeTemplate
    confidence: float = Field(ge=0.0, le=1.0)
    variables: Dict[str, Any] = Field(default_factory=dict)
    sources: Dict[str, VariableSource] = Field(default_factory=dict)

    @property
    def missing_variables(self) -> List[str]:
        """Declared variables that were neither extracted nor defaulted."""
        return [v.name for v in self.template.variables if v.name not in self.variables]

    @property
    def missing_required(self) -> List[str]:
        required = {v.name for v in self.template.variables if v.required}
        return [name for name in self.missing_variables if name in required]
