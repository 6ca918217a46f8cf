"""Configuration management using pydantic-settings."""

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


DEFAULT_RAG_PROMPT_TEMPLATE = (
    "{query}\n\n"
    "Context:\n"
    "---------------------\n"
    "{question_answer_context}\n"
    "---------------------\n\n"
    "Answer only from the context above. If the context does not contain "
    "the answer, say that you cannot answer."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Storage Configuration
    database_path: str = Field(default="./data/ragchat.db", description="DuckDB database file")

    # Model Client Configuration
    llm_provider: Literal["ollama", "openai"] = Field(default="ollama", description="Model server flavour")
    llm_base_url: str = Field(default="http://localhost:11434", description="Model server base URL")
    llm_api_key: Optional[str] = Field(default=None, description="API key for OpenAI-compatible servers")
    chat_model: str = Field(default="llama3.2", description="Chat model name")
    embedding_model: str = Field(default="nomic-embed-text", description="Embedding model name")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature")
    llm_timeout: float = Field(default=120.0, description="Model request timeout in seconds")
    system_prompt: Optional[str] = Field(default=None, description="Optional system prompt for every chat")

    # Chat Memory Configuration
    memory_max_messages: int = Field(default=12, ge=1, description="Messages replayed to the model")
    memory_window: Literal["oldest", "latest"] = Field(
        default="oldest", description="Which end of the history the replay window keeps"
    )

    # Knowledge Base Configuration
    knowledgebase_dir: str = Field(default="./knowledgebase", description="Directory of source documents")
    knowledgebase_pattern: str = Field(default="**/*.txt", description="Glob for source documents")
    load_documents_on_startup: bool = Field(default=True, description="Index the knowledge base at startup")
    chunk_size: int = Field(default=500, ge=1, description="Tokens per chunk")
    tokenizer_encoding: str = Field(default="cl100k_base", description="tiktoken encoding for chunking")
    embedding_batch_size: int = Field(default=32, ge=1, description="Chunks per embedding request")

    # Retrieval Configuration
    rag_enabled: bool = Field(default=False, description="Augment prompts with retrieved context")
    rag_top_k: int = Field(default=4, ge=1, description="Retrieved chunks per prompt")
    rag_prompt_template: str = Field(default=DEFAULT_RAG_PROMPT_TEMPLATE, description="RAG prompt template")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: str = Field(default="./logs/ragchat.log", description="Log file path")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1, description="Log file size before rotation")
    log_backup_count: int = Field(default=5, ge=0, description="Rotated log files to keep")

    def get_llm_config(self) -> dict:
        """Get keyword arguments shared by the chat and embedding clients."""
        config = {
            "base_url": self.llm_base_url,
            "timeout": self.llm_timeout,
        }
        # Only add api_key if it's not None
        if self.llm_api_key:
            config["api_key"] = self.llm_api_key
        return config


# Global settings instance
settings = Settings()
