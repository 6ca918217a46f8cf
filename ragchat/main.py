"""FastAPI main application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .db import DatabaseConnection
from .errors import register_exception_handlers
from .llm import create_chat_model, create_embedding_model
from .services import (
    ChatMemory,
    ChatService,
    DocumentLoaderService,
    DuckDBVectorStore,
    TokenTextSplitter,
)
from .utils.logger import init_app_logger
from .api.v1 import chats, stream, documents


# Initialize logger
logger = init_app_logger(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    # Startup
    logger.info("=" * 70)
    logger.info("Starting RAG Chat...")
    logger.info("=" * 70)

    logger.info("")
    logger.info("📡 Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")

    logger.info("")
    logger.info("🤖 Model Configuration:")
    logger.info(f"  Provider: {settings.llm_provider}")
    logger.info(f"  Base URL: {settings.llm_base_url}")
    logger.info(f"  Chat Model: {settings.chat_model}")
    logger.info(f"  Embedding Model: {settings.embedding_model}")
    if settings.llm_api_key:
        key = settings.llm_api_key
        masked_key = key[:8] + "..." + key[-4:] if len(key) > 12 else "***"
        logger.info(f"  API Key: {masked_key}")
    else:
        logger.info("  API Key: Not set")

    logger.info("")
    logger.info("💬 Chat Configuration:")
    logger.info(f"  Memory Window: {settings.memory_window} {settings.memory_max_messages} messages")
    logger.info(f"  RAG Enabled: {settings.rag_enabled} (top_k={settings.rag_top_k})")

    # Initialize storage
    logger.info("")
    logger.info("💾 Opening database...")
    db_conn = DatabaseConnection(settings.database_path)
    logger.info(f"  Database: {settings.database_path}")

    # Initialize model clients and services
    chat_model = create_chat_model(settings)
    embedding_model = create_embedding_model(settings)

    vector_store = DuckDBVectorStore(
        db_conn,
        embedding_model,
        batch_size=settings.embedding_batch_size
    )
    text_splitter = TokenTextSplitter(
        chunk_size=settings.chunk_size,
        encoding_name=settings.tokenizer_encoding
    )
    memory = ChatMemory(
        db_conn,
        max_messages=settings.memory_max_messages,
        window=settings.memory_window
    )
    chat_service = ChatService(
        db_conn,
        chat_model,
        memory,
        vector_store=vector_store,
        system_prompt=settings.system_prompt,
        rag_enabled=settings.rag_enabled,
        rag_top_k=settings.rag_top_k,
        rag_prompt_template=settings.rag_prompt_template
    )
    document_loader = DocumentLoaderService(db_conn, vector_store, text_splitter)

    # Set services in API modules
    chats.chat_service = chat_service
    documents.document_loader = document_loader
    documents.vector_store = vector_store
    documents.knowledgebase_dir = settings.knowledgebase_dir
    documents.knowledgebase_pattern = settings.knowledgebase_pattern

    if settings.load_documents_on_startup:
        logger.info("")
        logger.info("📚 Loading knowledge base...")
        logger.info(f"  Directory: {settings.knowledgebase_dir}")
        logger.info(f"  Pattern: {settings.knowledgebase_pattern}")
        report = await document_loader.load_documents(
            settings.knowledgebase_dir,
            settings.knowledgebase_pattern
        )
        logger.info(
            f"  Loaded: {len(report.loaded)}, Skipped: {len(report.skipped)}, "
            f"Failed: {len(report.failed)}"
        )

    logger.info("")
    logger.info("=" * 70)
    logger.info("✅ RAG Chat started successfully!")
    logger.info(f"📍 Access at: http://{settings.host}:{settings.port}")
    logger.info(f"📚 API Docs: http://{settings.host}:{settings.port}/docs")
    logger.info("=" * 70)

    yield

    # Shutdown
    logger.info("")
    logger.info("=" * 70)
    logger.info("Shutting down RAG Chat...")
    logger.info("=" * 70)

    chats.chat_service = None
    documents.document_loader = None
    documents.vector_store = None

    await chat_model.aclose()
    await embedding_model.aclose()
    db_conn.close()

    logger.info("✅ RAG Chat shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="RAG Chat",
    description="Chat with a language model over a persisted history and a local knowledge base",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(chats.router)
app.include_router(stream.router)
app.include_router(documents.router)


@app.get("/")
async def read_root():
    """
    API entry point.

    Returns:
        Service information
    """
    return {
        "message": "RAG Chat API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "RAG Chat"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ragchat.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
