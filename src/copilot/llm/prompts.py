"""Prompt templates for AI generation."""

SYSTEM_PROMPT = "You are an expert {language} developer{specialty}. Generate clean, efficient, and well-documented code."

SPECIALTY = " specializing in {framework}"

CURRENT_FILE_SECTION = "\n\nCurrent file: {current_file}"

SURROUNDING_CODE_SECTION = "\n\nSurrounding code:\n{surrounding_code}"

PROJECT_STRUCTURE_SECTION = "\n\nProject structure: {project_structure}"
