"""
Backend service generators.

codeintel/src/codeintel/templates/backend.py
"""

from ..comments import js_string, py_string
from . import TemplateContext, render

__all__ = ["nodejs", "python", "java", "csharp", "go", "generic_backend"]

_NODEJS = """
'use strict';

const express = require('express');
const helmet = require('helmet');
const cors = require('cors');
const rateLimit = require('express-rate-limit');
const { body, validationResult } = require('express-validator');

const FEATURE = __FEATURE_JS__;
const PORT = process.env.PORT || 3000;

const app = express();

const logger = {
  info: (message, meta = {}) => console.log(JSON.stringify({ level: 'info', message, ...meta })),
  error: (message, meta = {}) => console.error(JSON.stringify({ level: 'error', message, ...meta })),
};

// Security middleware
app.use(helmet());
app.use(cors({ origin: (process.env.ALLOWED_ORIGINS || '').split(',').filter(Boolean) }));
app.use(rateLimit({ windowMs: 15 * 60 * 1000, max: 100 }));
app.use(express.json({ limit: '1mb' }));

app.get('/health', (req, res) => {
  res.json({ status: 'ok', feature: FEATURE, uptime: process.uptime() });
});

app.post(
  '/api/process',
  [body('data').exists().withMessage('data is required')],
  async (req, res) => {
    const errors = validationResult(req);
    if (!errors.isEmpty()) {
      return res.status(400).json({ errors: errors.array() });
    }
    try {
      const result = await processFeature(req.body.data);
      logger.info('request processed', { feature: FEATURE });
      return res.json({ success: true, result });
    } catch (error) {
      logger.error('request failed', { error: error.message });
      return res.status(500).json({ success: false, error: 'Internal server error' });
    }
  }
);

async function processFeature(data) {
  return { received: data, processedAt: new Date().toISOString() };
}

const server = app.listen(PORT, () => {
  logger.info('server started', { port: PORT });
});

process.on('SIGTERM', () => {
  logger.info('shutting down');
  server.close();
});

module.exports = app;
"""

_PYTHON = """
import logging
import os
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

FEATURE = __FEATURE_PY__

app = FastAPI(title=FEATURE)


class ProcessRequest(BaseModel):
    data: Dict[str, Any] = Field(..., description="Payload to process")


class ProcessResponse(BaseModel):
    success: bool
    result: Dict[str, Any]


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok", "feature": FEATURE}


@app.post("/api/process", response_model=ProcessResponse)
async def process(request: ProcessRequest) -> ProcessResponse:
    try:
        result = await process_feature(request.data)
    except ValueError as exc:
        logger.warning("Rejected payload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.info("Processed request for %s", FEATURE)
    return ProcessResponse(success=True, result=result)


async def process_feature(data: Dict[str, Any]) -> Dict[str, Any]:
    if not data:
        raise ValueError("data must not be empty")
    return {"received": data}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
"""

_JAVA = """
package com.example.__PACKAGE__;

import jakarta.validation.Valid;
import jakarta.validation.constraints.NotNull;
import java.time.Instant;
import java.util.Map;
import org.slf4j.Logger;
import org.slf4j.LoggerFactory;
import org.springframework.boot.SpringApplication;
import org.springframework.boot.autoconfigure.SpringBootApplication;
import org.springframework.http.ResponseEntity;
import org.springframework.web.bind.annotation.ExceptionHandler;
import org.springframework.web.bind.annotation.GetMapping;
import org.springframework.web.bind.annotation.PostMapping;
import org.springframework.web.bind.annotation.RequestBody;
import org.springframework.web.bind.annotation.RestController;

@SpringBootApplication
@RestController
public class __CLASSNAME__Application {

    private static final Logger logger = LoggerFactory.getLogger(__CLASSNAME__Application.class);
    private static final String FEATURE = __FEATURE_JS__;

    public record ProcessRequest(@NotNull Map<String, Object> data) {}

    public static void main(String[] args) {
        SpringApplication.run(__CLASSNAME__Application.class, args);
    }

    @GetMapping("/health")
    public Map<String, String> health() {
        return Map.of("status", "ok", "feature", FEATURE);
    }

    @PostMapping("/api/process")
    public ResponseEntity<Map<String, Object>> process(@Valid @RequestBody ProcessRequest request) {
        try {
            Map<String, Object> result = Map.of("received", request.data(), "processedAt", Instant.now().toString());
            logger.info("Processed request for {}", FEATURE);
            return ResponseEntity.ok(Map.of("success", true, "result", result));
        } catch (IllegalArgumentException e) {
            logger.warn("Rejected payload", e);
            return ResponseEntity.badRequest().body(Map.of("success", false, "error", e.getMessage()));
        }
    }

    @ExceptionHandler(Exception.class)
    public ResponseEntity<Map<String, Object>> handleUnexpected(Exception e) {
        logger.error("Request failed", e);
        return ResponseEntity.internalServerError().body(Map.of("success", false, "error", "Internal server error"));
    }
}
"""

_CSHARP = """
using System.ComponentModel.DataAnnotations;

var builder = WebApplication.CreateBuilder(args);
builder.Services.AddProblemDetails();
var app = builder.Build();

const string Feature = __FEATURE_JS__;

app.UseExceptionHandler();
app.UseHttpsRedirection();

app.MapGet("/health", () => Results.Ok(new { status = "ok", feature = Feature }));

app.MapPost("/api/process", (ProcessRequest request, ILogger<Program> logger) =>
{
    var context = new ValidationContext(request);
    var errors = new List<ValidationResult>();
    if (!Validator.TryValidateObject(request, context, errors, validateAllProperties: true))
    {
        return Results.ValidationProblem(errors.ToDictionary(e => e.MemberNames.FirstOrDefault() ?? "data", e => new[] { e.ErrorMessage ?? "invalid" }));
    }
    try
    {
        logger.LogInformation("Processed request for {Feature}", Feature);
        return Results.Ok(new { success = true, result = request.Data, processedAt = DateTime.UtcNow });
    }
    catch (ArgumentException e)
    {
        logger.LogWarning(e, "Rejected payload");
        return Results.BadRequest(new { success = false, error = e.Message });
    }
});

app.Run();

public record ProcessRequest([property: Required] Dictionary<string, object> Data);
"""

_GO = """
package main

import (
	"context"
	"encoding/json"
	"log"
	"net/http"
	"os"
	"os/signal"
	"syscall"
	"time"
)

const feature = __FEATURE_JS__

type processRequest struct {
	Data map[string]interface{} `json:"data"`
}

func health(w http.ResponseWriter, r *http.Request) {
	w.Header().Set("Content-Type", "application/json")
	json.NewEncoder(w).Encode(map[string]string{"status": "ok", "feature": feature})
}

func process(w http.ResponseWriter, r *http.Request) {
	if r.Method != http.MethodPost {
		http.Error(w, "method not allowed", http.StatusMethodNotAllowed)
		return
	}
	var req processRequest
	if err := json.NewDecoder(http.MaxBytesReader(w, r.Body, 1<<20)).Decode(&req); err != nil {
		http.Error(w, "invalid JSON body", http.StatusBadRequest)
		return
	}
	if len(req.Data) == 0 {
		http.Error(w, "data is required", http.StatusBadRequest)
		return
	}
	log.Printf("processed request for %s", feature)
	w.Header().Set("Content-Type", "application/json")
	json.NewEncoder(w).Encode(map[string]interface{}{"success": true, "result": req.Data})
}

func main() {
	port := os.Getenv("PORT")
	if port == "" {
		port = "8080"
	}

	mux := http.NewServeMux()
	mux.HandleFunc("/health", health)
	mux.HandleFunc("/api/process", process)

	server := &http.Server{
		Addr:         ":" + port,
		Handler:      mux,
		ReadTimeout:  10 * time.Second,
		WriteTimeout: 10 * time.Second,
	}

	go func() {
		if err := server.ListenAndServe(); err != nil && err != http.ErrServerClosed {
			log.Fatalf("server error: %v", err)
		}
	}()

	stop := make(chan os.Signal, 1)
	signal.Notify(stop, syscall.SIGTERM, os.Interrupt)
	<-stop

	ctx, cancel := context.WithTimeout(context.Background(), 10*time.Second)
	defer cancel()
	if err := server.Shutdown(ctx); err != nil {
		log.Printf("shutdown error: %v", err)
	}
}
"""

_GENERIC = """
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

logger = logging.getLogger(__name__)

FEATURE = __FEATURE_PY__


@dataclass
class ServiceResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: str = ""


class __CLASSNAME__Service:
    \"\"\"Service implementing the feature with validation and error handling.\"\"\"

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def validate(self, payload: Dict[str, Any]) -> None:
        if not isinstance(payload, dict) or not payload:
            raise ValueError("payload must be a non-empty mapping")

    async def process(self, payload: Dict[str, Any]) -> ServiceResult:
        try:
            self.validate(payload)
            data = await asyncio.wait_for(self._handle(payload), timeout=self.timeout)
        except (ValueError, asyncio.TimeoutError) as exc:
            logger.warning("Processing failed for %s: %s", FEATURE, exc)
            return ServiceResult(success=False, error=str(exc))
        logger.info("Processed payload for %s", FEATURE)
        return ServiceResult(success=True, data=data)

    async def _handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {"received": payload}

    def health(self) -> Dict[str, str]:
        return {"status": "ok", "feature": FEATURE}


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(asyncio.run(__CLASSNAME__Service().process({"example": True})))
"""


def nodejs(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_NODEJS, feature_js=js_string(ctx.feature))


def python(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_PYTHON, feature_py=py_string(ctx.feature))


def java(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _JAVA,
        package=ctx.table_name.replace("_", ""),
        classname=ctx.class_name,
        feature_js=js_string(ctx.feature),
    )


def csharp(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_CSHARP, feature_js=js_string(ctx.feature))


def go(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(_GO, feature_js=js_string(ctx.feature))


def generic_backend(ctx: TemplateContext) -> str:
    return ctx.header() + "\n" + render(
        _GENERIC, classname=ctx.class_name, feature_py=py_string(ctx.feature)
    )
